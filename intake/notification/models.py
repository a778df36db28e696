from dataclasses import dataclass
from enum import Enum


class NotificationType(str, Enum):
    UPLOAD = "upload"
    OCR_COMPLETE = "ocrComplete"
    ANALYSIS_COMPLETE = "analysisComplete"
    ERROR = "error"


@dataclass(frozen=True)
class NotificationEvent:
    type: NotificationType
    document_name: str | None = None
    message: str | None = None


@dataclass(frozen=True)
class NotificationPreferences:
    """Which events are delivered. Error events ignore the per-type switches."""

    enabled: bool = True
    on_upload: bool = True
    on_ocr_complete: bool = True
    on_analysis_complete: bool = True
    daily_summary: bool = False

    def allows(self, notification_type: NotificationType) -> bool:
        if not self.enabled:
            return False
        if notification_type is NotificationType.UPLOAD:
            return self.on_upload
        if notification_type is NotificationType.OCR_COMPLETE:
            return self.on_ocr_complete
        if notification_type is NotificationType.ANALYSIS_COMPLETE:
            return self.on_analysis_complete
        return True


@dataclass(frozen=True)
class NotifierStatus:
    configured: bool
    connected: bool
    provider: str
    username: str | None = None
    error: str | None = None
