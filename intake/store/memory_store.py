import threading
from dataclasses import replace
from datetime import datetime, timezone

from intake.database.models import (
    ActivityRecord,
    AnalysisRecord,
    DocumentRecord,
    NewActivity,
    NewAnalysis,
    NewDocument,
    ServiceConnectionRecord,
    Stats,
)
from intake.processor.exceptions import (
    AnalysisNotFoundError,
    DocumentNotFoundError,
    ServiceConnectionNotFoundError,
)
from intake.store.base import BaseDocumentStore


def _now() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryDocumentStore(BaseDocumentStore):
    """Thread-safe dict-backed store for development and tests.

    Records are copied on the way in and out so callers never share mutable
    state with the store.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._documents: dict[int, DocumentRecord] = {}
        self._analyses: dict[int, AnalysisRecord] = {}
        self._activities: dict[int, ActivityRecord] = {}
        self._connections: dict[int, ServiceConnectionRecord] = {}
        self._next_document_id = 1
        self._next_analysis_id = 1
        self._next_activity_id = 1
        self._next_connection_id = 1

    # Documents

    def find_document(self, document_id: int) -> DocumentRecord | None:
        with self._lock:
            document = self._documents.get(document_id)
            return replace(document) if document is not None else None

    def get_document(self, document_id: int) -> DocumentRecord:
        document = self.find_document(document_id)
        if document is None:
            raise DocumentNotFoundError(f"Document {document_id} not found")
        return document

    def list_documents(self) -> list[DocumentRecord]:
        with self._lock:
            documents = [replace(d) for d in self._documents.values()]
        return sorted(documents, key=lambda d: (d.created_at, d.id), reverse=True)

    def list_recent_documents(self, limit: int) -> list[DocumentRecord]:
        return self.list_documents()[:limit]

    def search_documents(self, query: str) -> list[DocumentRecord]:
        needle = query.lower()
        return [
            d
            for d in self.list_documents()
            if needle in d.name.lower() or (d.content is not None and needle in d.content.lower())
        ]

    def create_document(self, document: NewDocument) -> DocumentRecord:
        with self._lock:
            now = _now()
            record = DocumentRecord(
                id=self._next_document_id,
                name=document.name,
                type=document.type,
                size=document.size,
                status=document.status,
                url=document.url,
                drive_id=document.drive_id,
                created_at=now,
                updated_at=now,
            )
            self._documents[record.id] = record
            self._next_document_id += 1
            return replace(record)

    def update_document(self, document_id: int, **changes: object) -> DocumentRecord:
        self.check_document_changes(changes)
        with self._lock:
            document = self._documents.get(document_id)
            if document is None:
                raise DocumentNotFoundError(f"Document {document_id} not found")
            updated = replace(document, **changes, updated_at=_now())
            self._documents[document_id] = updated
            return replace(updated)

    def delete_document(self, document_id: int) -> None:
        with self._lock:
            if document_id not in self._documents:
                raise DocumentNotFoundError(f"Document {document_id} not found")
            del self._documents[document_id]
            self._analyses = {
                k: a for k, a in self._analyses.items() if a.document_id != document_id
            }
            self._activities = {
                k: a for k, a in self._activities.items() if a.document_id != document_id
            }

    def fail_documents_in_status(self, status: str, new_status: str) -> int:
        with self._lock:
            stalled = [d for d in self._documents.values() if d.status == status]
            now = _now()
            for document in stalled:
                self._documents[document.id] = replace(document, status=new_status, updated_at=now)
            return len(stalled)

    # Analyses

    def get_analysis(self, analysis_id: int) -> AnalysisRecord:
        with self._lock:
            analysis = self._analyses.get(analysis_id)
            if analysis is None:
                raise AnalysisNotFoundError(f"Analysis {analysis_id} not found")
            return replace(analysis)

    def list_document_analyses(self, document_id: int) -> list[AnalysisRecord]:
        with self._lock:
            analyses = [replace(a) for a in self._analyses.values() if a.document_id == document_id]
        return sorted(analyses, key=lambda a: (a.created_at, a.id), reverse=True)

    def list_recent_analyses(self, limit: int) -> list[AnalysisRecord]:
        with self._lock:
            analyses = [replace(a) for a in self._analyses.values()]
        return sorted(analyses, key=lambda a: (a.created_at, a.id), reverse=True)[:limit]

    def record_analysis(
        self,
        analysis: NewAnalysis,
        document_status: str,
    ) -> tuple[AnalysisRecord, DocumentRecord]:
        with self._lock:
            document = self._documents.get(analysis.document_id)
            if document is None:
                raise DocumentNotFoundError(f"Document {analysis.document_id} not found")
            now = _now()
            record = AnalysisRecord(
                id=self._next_analysis_id,
                document_id=analysis.document_id,
                title=analysis.title,
                content=analysis.content,
                model=analysis.model,
                created_at=now,
            )
            self._analyses[record.id] = record
            self._next_analysis_id += 1
            updated = replace(document, ai_analyzed=True, status=document_status, updated_at=now)
            self._documents[document.id] = updated
            return replace(record), replace(updated)

    # Activities

    def create_activity(self, activity: NewActivity) -> ActivityRecord:
        with self._lock:
            record = ActivityRecord(
                id=self._next_activity_id,
                type=activity.type,
                description=activity.description,
                document_id=activity.document_id,
                document_name=activity.document_name,
                created_at=_now(),
            )
            self._activities[record.id] = record
            self._next_activity_id += 1
            return replace(record)

    def list_recent_activities(self, limit: int) -> list[ActivityRecord]:
        with self._lock:
            activities = [replace(a) for a in self._activities.values()]
        return sorted(activities, key=lambda a: (a.created_at, a.id), reverse=True)[:limit]

    def list_document_activities(self, document_id: int) -> list[ActivityRecord]:
        with self._lock:
            activities = [
                replace(a) for a in self._activities.values() if a.document_id == document_id
            ]
        return sorted(activities, key=lambda a: (a.created_at, a.id))

    # Service connections

    def list_service_connections(self) -> list[ServiceConnectionRecord]:
        with self._lock:
            return [replace(c) for c in sorted(self._connections.values(), key=lambda c: c.id)]

    def find_service_connection(self, connection_type: str) -> ServiceConnectionRecord | None:
        with self._lock:
            for connection in self._connections.values():
                if connection.type == connection_type:
                    return replace(connection)
        return None

    def create_service_connection(
        self,
        connection_type: str,
        name: str,
        status: str,
    ) -> ServiceConnectionRecord:
        with self._lock:
            now = _now()
            record = ServiceConnectionRecord(
                id=self._next_connection_id,
                type=connection_type,
                name=name,
                status=status,
                created_at=now,
                updated_at=now,
            )
            self._connections[record.id] = record
            self._next_connection_id += 1
            return replace(record)

    def update_service_connection(self, connection_id: int, status: str) -> ServiceConnectionRecord:
        with self._lock:
            connection = self._connections.get(connection_id)
            if connection is None:
                raise ServiceConnectionNotFoundError(
                    f"Service connection {connection_id} not found"
                )
            updated = replace(connection, status=status, updated_at=_now())
            self._connections[connection_id] = updated
            return replace(updated)

    # Stats

    def get_stats(self, storage_limit: int) -> Stats:
        with self._lock:
            documents = list(self._documents.values())
            return Stats(
                documents_processed=len(documents),
                ocr_scans=sum(1 for d in documents if d.ocr_processed),
                ai_analyses=len(self._analyses),
                storage_used=sum(d.size for d in documents),
                storage_limit=storage_limit,
            )
