from dataclasses import dataclass
from datetime import datetime


@dataclass
class DocumentRecord:
    """Represents a row from the documents table."""

    id: int
    name: str
    type: str
    size: int
    status: str
    ocr_processed: bool = False
    ai_analyzed: bool = False
    content: str | None = None
    url: str | None = None
    drive_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class AnalysisRecord:
    """Represents a row from the analyses table."""

    id: int
    document_id: int
    title: str
    content: str
    model: str
    created_at: datetime | None = None


@dataclass
class ActivityRecord:
    """Represents a row from the activities table."""

    id: int
    type: str
    description: str
    document_id: int | None = None
    document_name: str | None = None
    created_at: datetime | None = None


@dataclass
class ServiceConnectionRecord:
    """Represents a row from the service_connections table."""

    id: int
    type: str
    name: str
    status: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class NewDocument:
    name: str
    type: str
    size: int
    url: str | None = None
    drive_id: str | None = None
    status: str = "pending"


@dataclass(frozen=True)
class NewAnalysis:
    document_id: int
    title: str
    content: str
    model: str


@dataclass(frozen=True)
class NewActivity:
    type: str
    description: str
    document_id: int | None = None
    document_name: str | None = None


@dataclass(frozen=True)
class Stats:
    """Aggregate counters for the dashboard."""

    documents_processed: int
    ocr_scans: int
    ai_analyses: int
    storage_used: int
    storage_limit: int
