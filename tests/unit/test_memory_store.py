import pytest

from intake.database.models import NewActivity, NewAnalysis, NewDocument
from intake.processor.exceptions import (
    AnalysisNotFoundError,
    DocumentNotFoundError,
    ImmutableFieldError,
    ServiceConnectionNotFoundError,
)
from intake.store.memory_store import InMemoryDocumentStore


def _new_document(name: str = "Report.pdf", size: int = 100) -> NewDocument:
    return NewDocument(name=name, type="application/pdf", size=size, url=f"/uploads/{name}")


def _analysis(document_id: int) -> NewAnalysis:
    return NewAnalysis(document_id=document_id, title="Analysis", content="Summary", model="m")


def _activity(document_id: int | None, description: str = "Document uploaded") -> NewActivity:
    return NewActivity(type="upload", description=description, document_id=document_id)


class TestDocuments:
    def test_create_assigns_ids_and_defaults(self) -> None:
        store = InMemoryDocumentStore()

        first = store.create_document(_new_document("a.pdf"))
        second = store.create_document(_new_document("b.pdf"))

        assert (first.id, second.id) == (1, 2)
        assert first.status == "pending"
        assert first.ocr_processed is False
        assert first.ai_analyzed is False
        assert first.created_at == first.updated_at

    def test_update_changes_fields_and_bumps_updated_at(self) -> None:
        store = InMemoryDocumentStore()
        document = store.create_document(_new_document())

        updated = store.update_document(document.id, content="text", ocr_processed=True)

        assert updated.content == "text"
        assert updated.ocr_processed is True
        assert updated.updated_at >= document.updated_at
        assert store.get_document(document.id).content == "text"

    @pytest.mark.parametrize("field", ["type", "size", "id", "created_at"])
    def test_update_rejects_fixed_fields(self, field: str) -> None:
        store = InMemoryDocumentStore()
        document = store.create_document(_new_document())

        with pytest.raises(ImmutableFieldError, match=field):
            store.update_document(document.id, **{field: "changed"})

    def test_update_rejects_unknown_fields(self) -> None:
        store = InMemoryDocumentStore()
        document = store.create_document(_new_document())

        with pytest.raises(ValueError, match="Unknown document fields"):
            store.update_document(document.id, colour="blue")

    def test_update_missing_document_raises(self) -> None:
        with pytest.raises(DocumentNotFoundError, match="7 not found"):
            InMemoryDocumentStore().update_document(7, status="error")

    def test_returned_records_are_copies(self) -> None:
        store = InMemoryDocumentStore()
        document = store.create_document(_new_document())

        document.status = "error"

        assert store.get_document(document.id).status == "pending"

    def test_find_returns_none_when_missing(self) -> None:
        assert InMemoryDocumentStore().find_document(1) is None

    def test_list_is_newest_first(self) -> None:
        store = InMemoryDocumentStore()
        for name in ("a.pdf", "b.pdf", "c.pdf"):
            store.create_document(_new_document(name))

        assert [d.name for d in store.list_documents()] == ["c.pdf", "b.pdf", "a.pdf"]
        assert [d.name for d in store.list_recent_documents(2)] == ["c.pdf", "b.pdf"]

    def test_search_is_case_insensitive_over_name_and_content(self) -> None:
        store = InMemoryDocumentStore()
        invoice = store.create_document(_new_document("Invoice.pdf"))
        memo = store.create_document(_new_document("memo.pdf"))
        store.create_document(_new_document("other.pdf"))
        store.update_document(memo.id, content="The INVOICE total is due")

        assert {d.id for d in store.search_documents("invoice")} == {invoice.id, memo.id}

    def test_fail_documents_in_status(self) -> None:
        store = InMemoryDocumentStore()
        stuck = store.create_document(_new_document("a.pdf"))
        idle = store.create_document(_new_document("b.pdf"))
        store.update_document(stuck.id, status="analyzing")

        assert store.fail_documents_in_status("analyzing", "error") == 1
        assert store.get_document(stuck.id).status == "error"
        assert store.get_document(idle.id).status == "pending"


class TestDeleteCascade:
    def test_removes_only_the_documents_records(self) -> None:
        store = InMemoryDocumentStore()
        doomed = store.create_document(_new_document("doomed.pdf"))
        kept = store.create_document(_new_document("kept.pdf"))
        for _ in range(2):
            store.record_analysis(_analysis(doomed.id), "processed")
        store.record_analysis(_analysis(kept.id), "processed")
        for _ in range(4):
            store.create_activity(_activity(doomed.id))
        store.create_activity(_activity(kept.id))
        store.create_activity(_activity(None, "Connected to Telegram Bot"))

        store.delete_document(doomed.id)

        assert store.find_document(doomed.id) is None
        assert store.list_document_analyses(doomed.id) == []
        assert store.list_document_activities(doomed.id) == []
        assert len(store.list_document_analyses(kept.id)) == 1
        assert len(store.list_recent_activities(10)) == 2

    def test_missing_document_raises(self) -> None:
        with pytest.raises(DocumentNotFoundError):
            InMemoryDocumentStore().delete_document(3)


class TestAnalyses:
    def test_record_analysis_flags_document(self) -> None:
        store = InMemoryDocumentStore()
        document = store.create_document(_new_document())

        analysis, updated = store.record_analysis(_analysis(document.id), "processed")

        assert analysis.id == 1
        assert updated.ai_analyzed is True
        assert updated.status == "processed"
        assert store.get_analysis(analysis.id) == analysis

    def test_record_analysis_for_missing_document_raises(self) -> None:
        store = InMemoryDocumentStore()
        with pytest.raises(DocumentNotFoundError):
            store.record_analysis(_analysis(5), "processed")
        assert store.list_recent_analyses(5) == []

    def test_get_missing_analysis_raises(self) -> None:
        with pytest.raises(AnalysisNotFoundError):
            InMemoryDocumentStore().get_analysis(1)


class TestActivities:
    def test_recent_is_reverse_completion_order(self) -> None:
        store = InMemoryDocumentStore()
        for description in ("first", "second", "third"):
            store.create_activity(_activity(None, description))

        recent = store.list_recent_activities(2)

        assert [a.description for a in recent] == ["third", "second"]

    def test_document_activities_are_in_completion_order(self) -> None:
        store = InMemoryDocumentStore()
        document = store.create_document(_new_document())
        store.create_activity(_activity(document.id, "Document uploaded"))
        store.create_activity(_activity(document.id, "OCR processing completed"))

        descriptions = [a.description for a in store.list_document_activities(document.id)]

        assert descriptions == ["Document uploaded", "OCR processing completed"]


class TestServiceConnections:
    def test_create_find_and_update(self) -> None:
        store = InMemoryDocumentStore()
        created = store.create_service_connection("telegram", "Telegram Bot", "connected")

        assert store.find_service_connection("telegram") == created
        updated = store.update_service_connection(created.id, "disconnected")
        assert updated.status == "disconnected"
        assert store.list_service_connections() == [updated]

    def test_find_unknown_returns_none(self) -> None:
        assert InMemoryDocumentStore().find_service_connection("telegram") is None

    def test_update_unknown_raises(self) -> None:
        with pytest.raises(ServiceConnectionNotFoundError):
            InMemoryDocumentStore().update_service_connection(1, "connected")


def test_stats_aggregate_documents_and_analyses() -> None:
    store = InMemoryDocumentStore()
    first = store.create_document(_new_document("a.pdf", size=300))
    store.create_document(_new_document("b.pdf", size=200))
    store.update_document(first.id, content="text", ocr_processed=True)
    store.record_analysis(_analysis(first.id), "processed")

    stats = store.get_stats(storage_limit=1000)

    assert stats.documents_processed == 2
    assert stats.ocr_scans == 1
    assert stats.ai_analyses == 1
    assert stats.storage_used == 500
    assert stats.storage_limit == 1000
