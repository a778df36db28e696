from dataclasses import dataclass
from enum import Enum


class DocumentStatus(str, Enum):
    PENDING = "pending"
    ANALYZING = "analyzing"
    PROCESSED = "processed"
    ERROR = "error"


class ActivityType(str, Enum):
    UPLOAD = "upload"
    OCR = "ocr"
    ANALYSIS = "analysis"
    NOTIFICATION = "notification"
    INTEGRATION = "integration"


class Stage(str, Enum):
    OCR = "ocr"
    ANALYSIS = "analysis"


@dataclass(frozen=True)
class UploadedFile:
    """A file received from a caller, before any record exists for it."""

    name: str
    media_type: str
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class UploadOptions:
    """Per-upload switches for the optional pipeline stages."""

    store_in_drive: bool = False
    run_ocr: bool = False
    run_analysis: bool = False


@dataclass(frozen=True)
class StoredFile:
    """Location of an uploaded file in the local upload directory."""

    url: str
    path: str
    size: int
