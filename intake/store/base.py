from abc import ABC, abstractmethod
from typing import ClassVar

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
from intake.processor.exceptions import ImmutableFieldError


class BaseDocumentStore(ABC):
    """Contract for document, analysis, activity and service connection persistence.

    Implementations hold no business rules beyond referential cleanup: deleting
    a document removes its analyses and the activities that reference it, and
    recording an analysis flags its document as analyzed in the same unit of work.
    """

    UPDATABLE_DOCUMENT_FIELDS: ClassVar[frozenset[str]] = frozenset(
        {"name", "status", "ocr_processed", "ai_analyzed", "content", "url", "drive_id"}
    )
    IMMUTABLE_DOCUMENT_FIELDS: ClassVar[frozenset[str]] = frozenset(
        {"id", "type", "size", "created_at"}
    )

    @classmethod
    def check_document_changes(cls, changes: dict[str, object]) -> None:
        """Reject changes to fixed or unknown document fields.

        Raises:
            ImmutableFieldError: if a field fixed at creation is targeted.
            ValueError: if an unknown field is targeted.
        """
        fixed = sorted(set(changes) & cls.IMMUTABLE_DOCUMENT_FIELDS)
        if fixed:
            raise ImmutableFieldError(f"Document fields cannot be changed: {fixed}")
        unknown = sorted(set(changes) - cls.UPDATABLE_DOCUMENT_FIELDS)
        if unknown:
            raise ValueError(f"Unknown document fields: {unknown}")

    # Documents

    @abstractmethod
    def find_document(self, document_id: int) -> DocumentRecord | None:
        """Return the document or None when it does not exist."""

    @abstractmethod
    def get_document(self, document_id: int) -> DocumentRecord:
        """Return the document.

        Raises:
            DocumentNotFoundError: if no document with this ID exists.
        """

    @abstractmethod
    def list_documents(self) -> list[DocumentRecord]:
        """All documents, most recent first."""

    @abstractmethod
    def list_recent_documents(self, limit: int) -> list[DocumentRecord]:
        """Up to ``limit`` documents, most recent first."""

    @abstractmethod
    def search_documents(self, query: str) -> list[DocumentRecord]:
        """Case-insensitive substring match over name and content, most recent first."""

    @abstractmethod
    def create_document(self, document: NewDocument) -> DocumentRecord:
        """Insert a document and return the stored record."""

    @abstractmethod
    def update_document(self, document_id: int, **changes: object) -> DocumentRecord:
        """Apply ``changes`` and bump ``updated_at``.

        Raises:
            DocumentNotFoundError: if no document with this ID exists.
            ImmutableFieldError: if ``type``, ``size`` or another fixed field is targeted.
        """

    @abstractmethod
    def delete_document(self, document_id: int) -> None:
        """Delete the document with its analyses and referencing activities.

        Raises:
            DocumentNotFoundError: if no document with this ID exists.
        """

    @abstractmethod
    def fail_documents_in_status(self, status: str, new_status: str) -> int:
        """Move every document in ``status`` to ``new_status``. Returns the count."""

    # Analyses

    @abstractmethod
    def get_analysis(self, analysis_id: int) -> AnalysisRecord:
        """Return the analysis.

        Raises:
            AnalysisNotFoundError: if no analysis with this ID exists.
        """

    @abstractmethod
    def list_document_analyses(self, document_id: int) -> list[AnalysisRecord]:
        """Analyses of one document, most recent first."""

    @abstractmethod
    def list_recent_analyses(self, limit: int) -> list[AnalysisRecord]:
        """Up to ``limit`` analyses, most recent first."""

    @abstractmethod
    def record_analysis(
        self,
        analysis: NewAnalysis,
        document_status: str,
    ) -> tuple[AnalysisRecord, DocumentRecord]:
        """Insert an analysis and set ``ai_analyzed`` and ``status`` on its document atomically.

        Raises:
            DocumentNotFoundError: if the referenced document does not exist.
        """

    # Activities

    @abstractmethod
    def create_activity(self, activity: NewActivity) -> ActivityRecord:
        """Append an activity record."""

    @abstractmethod
    def list_recent_activities(self, limit: int) -> list[ActivityRecord]:
        """Up to ``limit`` activities in reverse completion order."""

    @abstractmethod
    def list_document_activities(self, document_id: int) -> list[ActivityRecord]:
        """Activities referencing one document, in completion order."""

    # Service connections

    @abstractmethod
    def list_service_connections(self) -> list[ServiceConnectionRecord]:
        """All service connections ordered by ID."""

    @abstractmethod
    def find_service_connection(self, connection_type: str) -> ServiceConnectionRecord | None:
        """Return the connection of the given type or None."""

    @abstractmethod
    def create_service_connection(
        self,
        connection_type: str,
        name: str,
        status: str,
    ) -> ServiceConnectionRecord:
        """Insert a service connection."""

    @abstractmethod
    def update_service_connection(self, connection_id: int, status: str) -> ServiceConnectionRecord:
        """Set the status of a connection.

        Raises:
            ServiceConnectionNotFoundError: if no connection with this ID exists.
        """

    # Stats

    @abstractmethod
    def get_stats(self, storage_limit: int) -> Stats:
        """Aggregate document, OCR, analysis and storage counters."""
