from intake.database.connection import get_connection
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
from intake.database.repositories.activity_repository import ActivityRepository
from intake.database.repositories.analysis_repository import AnalysisRepository
from intake.database.repositories.document_repository import DocumentRepository
from intake.database.repositories.service_connection_repository import (
    ServiceConnectionRepository,
)
from intake.processor.exceptions import (
    AnalysisNotFoundError,
    DocumentNotFoundError,
    ServiceConnectionNotFoundError,
)
from intake.store.base import BaseDocumentStore


class PostgresDocumentStore(BaseDocumentStore):
    """Store backed by the shared psycopg connection pool.

    Each public method runs in its own transaction: the pool commits when the
    block exits normally and rolls back when it raises.
    """

    def __init__(
        self,
        documents: DocumentRepository | None = None,
        analyses: AnalysisRepository | None = None,
        activities: ActivityRepository | None = None,
        connections: ServiceConnectionRepository | None = None,
    ) -> None:
        self._documents = documents or DocumentRepository()
        self._analyses = analyses or AnalysisRepository()
        self._activities = activities or ActivityRepository()
        self._connections = connections or ServiceConnectionRepository()

    # Documents

    def find_document(self, document_id: int) -> DocumentRecord | None:
        with get_connection() as conn:
            return self._documents.find_by_id(conn, document_id)

    def get_document(self, document_id: int) -> DocumentRecord:
        document = self.find_document(document_id)
        if document is None:
            raise DocumentNotFoundError(f"Document {document_id} not found")
        return document

    def list_documents(self) -> list[DocumentRecord]:
        with get_connection() as conn:
            return self._documents.list_recent(conn)

    def list_recent_documents(self, limit: int) -> list[DocumentRecord]:
        with get_connection() as conn:
            return self._documents.list_recent(conn, limit)

    def search_documents(self, query: str) -> list[DocumentRecord]:
        with get_connection() as conn:
            return self._documents.search(conn, query)

    def create_document(self, document: NewDocument) -> DocumentRecord:
        with get_connection() as conn:
            return self._documents.insert(conn, document)

    def update_document(self, document_id: int, **changes: object) -> DocumentRecord:
        self.check_document_changes(changes)
        with get_connection() as conn:
            if not changes:
                updated = self._documents.find_by_id(conn, document_id)
            else:
                updated = self._documents.update(conn, document_id, changes)
        if updated is None:
            raise DocumentNotFoundError(f"Document {document_id} not found")
        return updated

    def delete_document(self, document_id: int) -> None:
        with get_connection() as conn:
            self._activities.delete_for_document(conn, document_id)
            self._analyses.delete_for_document(conn, document_id)
            if not self._documents.delete(conn, document_id):
                raise DocumentNotFoundError(f"Document {document_id} not found")

    def fail_documents_in_status(self, status: str, new_status: str) -> int:
        with get_connection() as conn:
            return self._documents.update_status_where(conn, status, new_status)

    # Analyses

    def get_analysis(self, analysis_id: int) -> AnalysisRecord:
        with get_connection() as conn:
            analysis = self._analyses.find_by_id(conn, analysis_id)
        if analysis is None:
            raise AnalysisNotFoundError(f"Analysis {analysis_id} not found")
        return analysis

    def list_document_analyses(self, document_id: int) -> list[AnalysisRecord]:
        with get_connection() as conn:
            return self._analyses.list_for_document(conn, document_id)

    def list_recent_analyses(self, limit: int) -> list[AnalysisRecord]:
        with get_connection() as conn:
            return self._analyses.list_recent(conn, limit)

    def record_analysis(
        self,
        analysis: NewAnalysis,
        document_status: str,
    ) -> tuple[AnalysisRecord, DocumentRecord]:
        with get_connection() as conn:
            document = self._documents.update(
                conn,
                analysis.document_id,
                {"ai_analyzed": True, "status": document_status},
            )
            if document is None:
                raise DocumentNotFoundError(f"Document {analysis.document_id} not found")
            record = self._analyses.insert(conn, analysis)
        return record, document

    # Activities

    def create_activity(self, activity: NewActivity) -> ActivityRecord:
        with get_connection() as conn:
            return self._activities.insert(conn, activity)

    def list_recent_activities(self, limit: int) -> list[ActivityRecord]:
        with get_connection() as conn:
            return self._activities.list_recent(conn, limit)

    def list_document_activities(self, document_id: int) -> list[ActivityRecord]:
        with get_connection() as conn:
            return self._activities.list_for_document(conn, document_id)

    # Service connections

    def list_service_connections(self) -> list[ServiceConnectionRecord]:
        with get_connection() as conn:
            return self._connections.list_all(conn)

    def find_service_connection(self, connection_type: str) -> ServiceConnectionRecord | None:
        with get_connection() as conn:
            return self._connections.find_by_type(conn, connection_type)

    def create_service_connection(
        self,
        connection_type: str,
        name: str,
        status: str,
    ) -> ServiceConnectionRecord:
        with get_connection() as conn:
            return self._connections.insert(conn, connection_type, name, status)

    def update_service_connection(self, connection_id: int, status: str) -> ServiceConnectionRecord:
        with get_connection() as conn:
            connection = self._connections.update_status(conn, connection_id, status)
        if connection is None:
            raise ServiceConnectionNotFoundError(f"Service connection {connection_id} not found")
        return connection

    # Stats

    def get_stats(self, storage_limit: int) -> Stats:
        with get_connection() as conn:
            documents, ocr_scans, storage_used = self._documents.totals(conn)
            analyses = self._analyses.count(conn)
        return Stats(
            documents_processed=documents,
            ocr_scans=ocr_scans,
            ai_analyses=analyses,
            storage_used=storage_used,
            storage_limit=storage_limit,
        )
