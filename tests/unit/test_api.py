from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

from intake.api.app import create_app
from intake.cloud_storage.unconfigured_adapter import UnconfiguredCloudStorage
from intake.processor.orchestrator import DocumentOrchestrator


@pytest.fixture
def orchestrator(make_orchestrator) -> DocumentOrchestrator:
    return make_orchestrator()


@pytest.fixture
def client(settings, orchestrator) -> Generator[TestClient, None, None]:
    with TestClient(create_app(settings, orchestrator=orchestrator)) as test_client:
        yield test_client


def _upload(client: TestClient, content: bytes, **form: str) -> dict:
    response = client.post(
        "/api/documents/upload",
        files={"file": ("Report.pdf", content, "application/pdf")},
        data=form,
    )
    assert response.status_code == 201, response.text
    return response.json()


class TestUpload:
    def test_returns_created_document_in_camel_case(self, client, sample_pdf_bytes) -> None:
        body = _upload(client, sample_pdf_bytes)

        assert body["name"] == "Report.pdf"
        assert body["type"] == "application/pdf"
        assert body["size"] == len(sample_pdf_bytes)
        assert body["status"] == "pending"
        assert body["ocrProcessed"] is False
        assert body["aiAnalyzed"] is False
        assert body["url"].startswith("/uploads/")

    def test_cascade_completes_in_background(
        self, client, orchestrator, sample_pdf_bytes
    ) -> None:
        body = _upload(client, sample_pdf_bytes, runOcr="true", runAnalysis="true")
        orchestrator.worker.join()

        document = client.get(f"/api/documents/{body['id']}").json()
        assert document["status"] == "processed"
        assert document["ocrProcessed"] is True
        assert document["aiAnalyzed"] is True
        analyses = client.get(f"/api/documents/{body['id']}/analyses").json()
        assert len(analyses) == 1
        assert analyses[0]["documentId"] == body["id"]

    def test_missing_file_is_rejected(self, client) -> None:
        response = client.post("/api/documents/upload", data={"runOcr": "true"})

        assert response.status_code == 400
        assert response.json() == {"error": "No file uploaded", "operation": "upload_document"}

    def test_oversize_file_returns_413(self, settings, make_orchestrator) -> None:
        orchestrator = make_orchestrator(max_upload_bytes=16)
        with TestClient(create_app(settings, orchestrator=orchestrator)) as client:
            response = client.post(
                "/api/documents/upload",
                files={"file": ("big.txt", b"x" * 64, "text/plain")},
            )

        assert response.status_code == 413
        assert "upload limit" in response.json()["error"]
        assert orchestrator.list_documents() == []


class TestDocuments:
    def test_unknown_document_returns_404(self, client) -> None:
        response = client.get("/api/documents/999")

        assert response.status_code == 404
        assert response.json() == {
            "error": "Document 999 not found",
            "operation": "get_document",
        }

    def test_non_numeric_id_is_a_bad_request(self, client) -> None:
        response = client.get("/api/documents/abc")

        assert response.status_code == 400
        assert response.json()["operation"] == "get_document"

    def test_delete_returns_204(self, client, sample_pdf_bytes) -> None:
        body = _upload(client, sample_pdf_bytes)

        response = client.delete(f"/api/documents/{body['id']}")

        assert response.status_code == 204
        assert client.get(f"/api/documents/{body['id']}").status_code == 404

    def test_list_and_recent(self, client, sample_pdf_bytes) -> None:
        first = _upload(client, sample_pdf_bytes)
        second = _upload(client, sample_pdf_bytes)

        listed = client.get("/api/documents").json()
        recent = client.get("/api/documents/recent", params={"limit": 1}).json()

        assert {document["id"] for document in listed} == {first["id"], second["id"]}
        assert [document["id"] for document in recent] == [second["id"]]

    def test_blank_search_is_rejected(self, client) -> None:
        response = client.get("/api/documents/search", params={"q": "  "})

        assert response.status_code == 400
        assert response.json()["error"] == "Search query is required"

    def test_schedule_ocr_returns_202(self, client, orchestrator, sample_pdf_bytes) -> None:
        body = _upload(client, sample_pdf_bytes)

        response = client.post(f"/api/documents/{body['id']}/ocr")
        orchestrator.worker.join()

        assert response.status_code == 202
        assert response.json() == {
            "success": True,
            "message": "OCR processing started",
            "documentId": body["id"],
        }
        document = client.get(f"/api/documents/{body['id']}").json()
        assert document["ocrProcessed"] is True
        assert document["aiAnalyzed"] is False

    def test_schedule_ocr_with_unknown_language_is_rejected(
        self, client, sample_pdf_bytes
    ) -> None:
        body = _upload(client, sample_pdf_bytes)

        response = client.post(f"/api/documents/{body['id']}/ocr", params={"language": "xx"})

        assert response.status_code == 400

    def test_analyze_without_content_returns_400(self, client, sample_pdf_bytes) -> None:
        body = _upload(client, sample_pdf_bytes)

        response = client.post(f"/api/documents/{body['id']}/analyze")

        assert response.status_code == 400
        assert "no extracted text" in response.json()["error"]
        document = client.get(f"/api/documents/{body['id']}").json()
        assert document["status"] == "pending"

    def test_analyze_after_ocr(self, client, orchestrator, sample_pdf_bytes) -> None:
        body = _upload(client, sample_pdf_bytes, runOcr="true")
        orchestrator.worker.join()

        response = client.post(
            f"/api/documents/{body['id']}/analyze",
            json={"prompt": "List the key figures"},
        )

        assert response.status_code == 200
        analysis = response.json()
        assert analysis["documentId"] == body["id"]
        assert analysis["model"] == "example"
        assert client.get(f"/api/documents/{body['id']}").json()["aiAnalyzed"] is True


class TestAiAnalyze:
    def test_requires_document_id(self, client) -> None:
        response = client.post("/api/ai/analyze", json={})

        assert response.status_code == 400
        assert response.json() == {"error": "Document ID is required", "operation": "analyze"}

    def test_recent_analyses_is_empty_initially(self, client) -> None:
        assert client.get("/api/analyses/recent").json() == []


class TestOcr:
    def test_process_without_input_is_rejected(self, client) -> None:
        response = client.post("/api/ocr/process", data={"language": "eng"})

        assert response.status_code == 400
        assert response.json()["error"] == "No file or document ID provided"

    def test_process_ad_hoc_file_leaves_no_records(
        self, client, orchestrator, sample_pdf_bytes
    ) -> None:
        response = client.post(
            "/api/ocr/process",
            files={"file": ("scan.pdf", sample_pdf_bytes, "application/pdf")},
            data={"language": "deu"},
        )

        assert response.status_code == 200
        assert response.json() == {
            "text": "Quarterly revenue grew by 12 percent",
            "language": "deu",
            "documentId": None,
        }
        assert orchestrator.list_documents() == []

    def test_process_stored_document(self, client, sample_pdf_bytes) -> None:
        body = _upload(client, sample_pdf_bytes)

        response = client.post("/api/ocr/process", data={"documentId": str(body["id"])})

        assert response.status_code == 200
        assert response.json()["documentId"] == body["id"]
        assert response.json()["language"] == "eng"
        document = client.get(f"/api/documents/{body['id']}").json()
        assert document["content"] == "Quarterly revenue grew by 12 percent"
        assert document["aiAnalyzed"] is False

    def test_file_takes_precedence_over_document_id(
        self, client, orchestrator, sample_pdf_bytes
    ) -> None:
        body = _upload(client, sample_pdf_bytes)

        response = client.post(
            "/api/ocr/process",
            files={"file": ("scan.pdf", sample_pdf_bytes, "application/pdf")},
            data={"documentId": str(body["id"])},
        )

        assert response.status_code == 200
        assert response.json()["documentId"] is None
        document = orchestrator.get_document(body["id"])
        assert document.status == "pending"
        assert document.content is None

    def test_languages(self, client) -> None:
        languages = client.get("/api/ocr/languages").json()

        assert languages[0] == {"code": "eng", "name": "English"}
        assert {"code": "chi_sim", "name": "Chinese (Simplified)"} in languages


class TestDashboard:
    def test_stats_keys(self, client, sample_pdf_bytes) -> None:
        _upload(client, sample_pdf_bytes)

        stats = client.get("/api/stats").json()

        assert set(stats) == {
            "documentsProcessed",
            "ocrScans",
            "aiAnalyses",
            "storageUsed",
            "storageLimit",
        }
        assert stats["storageUsed"] == len(sample_pdf_bytes)

    def test_recent_activities(self, client, sample_pdf_bytes) -> None:
        body = _upload(client, sample_pdf_bytes)

        activities = client.get("/api/activities/recent").json()

        upload = next(activity for activity in activities if activity["type"] == "upload")
        assert upload["documentId"] == body["id"]
        assert upload["documentName"] == "Report.pdf"


class TestConnections:
    def test_connect_unknown_service_returns_404(self, client) -> None:
        response = client.post("/api/connections/dropbox/connect")

        assert response.status_code == 404
        assert response.json()["operation"] == "connect_service"

    def test_connect_and_list(self, client) -> None:
        response = client.post("/api/connections/telegram/connect")

        assert response.status_code == 200
        assert response.json()["status"] == "connected"
        listed = client.get("/api/connections").json()
        assert [connection["type"] for connection in listed] == ["telegram"]


class TestDrive:
    def test_status_of_configured_storage(self, client) -> None:
        body = client.get("/api/drive/status").json()

        assert body["isConnected"] is True
        assert body["provider"] == "fake"

    def test_unconfigured_storage_returns_503(self, settings, make_orchestrator) -> None:
        orchestrator = make_orchestrator(storage=UnconfiguredCloudStorage())
        with TestClient(create_app(settings, orchestrator=orchestrator)) as client:
            response = client.get("/api/drive/files")

        assert response.status_code == 503
        assert response.json() == {
            "error": "Cloud storage is not configured",
            "operation": "list_drive_files",
        }

    def test_import_creates_document(self, client, orchestrator) -> None:
        orchestrator.cloud_storage.add("remote-9", "notes.txt", "text/plain", b"remote notes")

        response = client.post("/api/drive/import", json={"fileId": "remote-9"})

        assert response.status_code == 201
        assert response.json()["driveId"] == "remote-9"
        assert response.json()["status"] == "pending"

    def test_import_without_id_is_rejected(self, client) -> None:
        response = client.post("/api/drive/import", json={})

        assert response.status_code == 400
        assert response.json()["error"] == "File ID is required"


class TestTelegramSettings:
    def test_get_defaults(self, client) -> None:
        assert client.get("/api/telegram/settings").json() == {
            "enabled": True,
            "onUpload": True,
            "onOcrComplete": True,
            "onAnalysisComplete": True,
            "dailySummary": False,
        }

    def test_partial_update(self, client, sample_pdf_bytes, notifier) -> None:
        response = client.put("/api/telegram/settings", json={"onUpload": False})

        assert response.status_code == 200
        assert response.json()["onUpload"] is False
        assert response.json()["enabled"] is True
        _upload(client, sample_pdf_bytes)
        assert notifier.messages == []

    def test_status(self, client) -> None:
        body = client.get("/api/telegram/status").json()

        assert body["configured"] is True
        assert body["provider"] == "recording"
