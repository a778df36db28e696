"""Request and response bodies. JSON keys are camelCase."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class DocumentResponse(ApiModel):
    id: int
    name: str
    type: str
    size: int
    status: str
    ocr_processed: bool
    ai_analyzed: bool
    content: str | None = None
    url: str | None = None
    drive_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class AnalysisResponse(ApiModel):
    id: int
    document_id: int
    title: str
    content: str
    model: str
    created_at: datetime | None = None


class ActivityResponse(ApiModel):
    id: int
    type: str
    description: str
    document_id: int | None = None
    document_name: str | None = None
    created_at: datetime | None = None


class ServiceConnectionResponse(ApiModel):
    id: int
    type: str
    name: str
    status: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class StatsResponse(ApiModel):
    documents_processed: int
    ocr_scans: int
    ai_analyses: int
    storage_used: int
    storage_limit: int


class AnalyzeRequest(ApiModel):
    prompt: str | None = None


class AiAnalyzeRequest(ApiModel):
    document_id: int | None = None
    prompt: str | None = None


class OcrScheduledResponse(ApiModel):
    success: bool = True
    message: str
    document_id: int


class OcrResultResponse(ApiModel):
    text: str
    language: str
    document_id: int | None = None


class LanguageResponse(ApiModel):
    code: str
    name: str


class RemoteFileResponse(ApiModel):
    id: str
    name: str
    media_type: str
    size: int
    modified_at: datetime | None = None


class DriveImportRequest(ApiModel):
    file_id: str | None = None


class DriveStatusResponse(ApiModel):
    is_connected: bool
    configured: bool
    provider: str
    location: str | None = None
    error: str | None = None


class TelegramStatusResponse(ApiModel):
    is_connected: bool
    configured: bool
    provider: str
    username: str | None = None
    error: str | None = None


class NotificationSettingsResponse(ApiModel):
    enabled: bool
    on_upload: bool
    on_ocr_complete: bool
    on_analysis_complete: bool
    daily_summary: bool


class NotificationSettingsUpdate(ApiModel):
    enabled: bool | None = None
    on_upload: bool | None = None
    on_ocr_complete: bool | None = None
    on_analysis_complete: bool | None = None
    daily_summary: bool | None = None


class MessageResponse(ApiModel):
    success: bool = True
    message: str
