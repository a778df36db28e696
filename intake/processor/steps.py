from intake.analysis.base import BaseAnalyzer
from intake.database.models import NewActivity, NewAnalysis
from intake.logging.logger import Log
from intake.notification.models import NotificationEvent, NotificationType
from intake.notification.service import NotificationService
from intake.ocr.base import BaseOcrEngine
from intake.ocr.exceptions import OcrEmptyResultError
from intake.processor.capability_call import CapabilityCaller
from intake.processor.exceptions import DocumentValidationError, MissingContentError
from intake.processor.file_store import UploadStore
from intake.processor.models import ActivityType, DocumentStatus
from intake.processor.pipeline import PipelineStep, StageContext
from intake.processor.state_machine import DocumentLifecycle
from intake.store.base import BaseDocumentStore


class LoadDocumentStep(PipelineStep):
    def __init__(self, store: BaseDocumentStore) -> None:
        self._store = store

    def run(self, context: StageContext) -> StageContext:
        context.document = self._store.get_document(context.document_id)
        return context


class ResolveFileStep(PipelineStep):
    def __init__(self, uploads: UploadStore) -> None:
        self._uploads = uploads

    def run(self, context: StageContext) -> StageContext:
        document = context.require_document()
        if not document.url:
            raise DocumentValidationError(f"Document {document.id} has no stored file")
        context.file_path = self._uploads.resolve(document.url)
        return context


class RequireContentStep(PipelineStep):
    def run(self, context: StageContext) -> StageContext:
        document = context.require_document()
        if not document.content or not document.content.strip():
            raise MissingContentError(
                f"Document {document.id} has no extracted text to analyze"
            )
        return context


class StartStageStep(PipelineStep):
    def __init__(self, store: BaseDocumentStore) -> None:
        self._store = store

    def run(self, context: StageContext) -> StageContext:
        document = context.require_document()
        status = DocumentLifecycle.start(document.status, context.stage)
        context.document = self._store.update_document(document.id, status=status.value)
        context.started = True
        Log.info("Stage started", document_id=document.id, stage=context.stage.value)
        return context


class ExtractTextStep(PipelineStep):
    def __init__(self, ocr_engine: BaseOcrEngine, caller: CapabilityCaller) -> None:
        self._ocr_engine = ocr_engine
        self._caller = caller

    def run(self, context: StageContext) -> StageContext:
        if context.file_path is None:
            raise ValueError("StageContext.file_path must be set before OCR")
        text = self._caller.call(
            "ocr",
            self._ocr_engine.extract,
            context.file_path,
            language=context.language,
        )
        if not text.strip():
            raise OcrEmptyResultError(f"OCR found no text in document {context.document_id}")
        context.extracted_text = text
        Log.info(f"Extracted {len(text)} chars", document_id=context.document_id)
        return context


class PersistOcrResultStep(PipelineStep):
    def __init__(self, store: BaseDocumentStore) -> None:
        self._store = store

    def run(self, context: StageContext) -> StageContext:
        document = context.require_document()
        status = DocumentLifecycle.succeed(document.status, context.stage)
        context.document = self._store.update_document(
            document.id,
            content=context.extracted_text,
            ocr_processed=True,
            status=status.value,
        )
        return context


class AnalyzeStep(PipelineStep):
    def __init__(self, analyzer: BaseAnalyzer, caller: CapabilityCaller) -> None:
        self._analyzer = analyzer
        self._caller = caller

    def run(self, context: StageContext) -> StageContext:
        document = context.require_document()
        context.analysis_text = self._caller.call(
            "analysis",
            self._analyzer.analyze,
            document.content or "",
            media_type=document.type,
            instruction=context.instruction,
        )
        return context


class PersistAnalysisStep(PipelineStep):
    def __init__(self, store: BaseDocumentStore, analyzer: BaseAnalyzer) -> None:
        self._store = store
        self._analyzer = analyzer

    def run(self, context: StageContext) -> StageContext:
        document = context.require_document()
        status = DocumentLifecycle.succeed(document.status, context.stage)
        context.analysis, context.document = self._store.record_analysis(
            NewAnalysis(
                document_id=document.id,
                title=f"Analysis of {document.name}",
                content=context.analysis_text,
                model=self._analyzer.model,
            ),
            document_status=status.value,
        )
        return context


class RecordActivityStep(PipelineStep):
    def __init__(
        self,
        store: BaseDocumentStore,
        activity_type: ActivityType,
        description: str,
    ) -> None:
        self._store = store
        self._activity_type = activity_type
        self._description = description

    def run(self, context: StageContext) -> StageContext:
        document = context.require_document()
        self._store.create_activity(
            NewActivity(
                type=self._activity_type.value,
                description=self._description,
                document_id=document.id,
                document_name=document.name,
            )
        )
        Log.info("Stage completed", document_id=document.id, stage=context.stage.value)
        return context


def send_notification(
    notifications: NotificationService,
    store: BaseDocumentStore,
    caller: CapabilityCaller,
    event: NotificationEvent,
    document_id: int | None = None,
    record_activity: bool = True,
) -> bool:
    """Deliver a notification without ever raising.

    A delivered notification is recorded as an activity unless
    ``record_activity`` is False; stage failures leave the activity log alone.
    """
    try:
        delivered = caller.call("notification", notifications.notify, event)
        if delivered and record_activity:
            store.create_activity(
                NewActivity(
                    type=ActivityType.NOTIFICATION.value,
                    description=f"Notification sent via {notifications.notifier.name}",
                    document_id=document_id,
                    document_name=event.document_name if document_id is not None else None,
                )
            )
        return delivered
    except Exception as exc:
        Log.warning(f"Notification {event.type.value} failed: {exc}")
        return False


class NotifyStep(PipelineStep):
    """Best-effort notification; never fails the stage."""

    def __init__(
        self,
        notifications: NotificationService,
        store: BaseDocumentStore,
        caller: CapabilityCaller,
        notification_type: NotificationType,
    ) -> None:
        self._notifications = notifications
        self._store = store
        self._caller = caller
        self._notification_type = notification_type

    def run(self, context: StageContext) -> StageContext:
        document = context.require_document()
        send_notification(
            self._notifications,
            self._store,
            self._caller,
            NotificationEvent(type=self._notification_type, document_name=document.name),
            document_id=document.id,
        )
        return context


class MarkFailedStep(PipelineStep):
    """Moves a started stage's document to ``error`` and sends an error notification."""

    def __init__(
        self,
        store: BaseDocumentStore,
        notifications: NotificationService,
        caller: CapabilityCaller,
    ) -> None:
        self._store = store
        self._notifications = notifications
        self._caller = caller

    def run(self, context: StageContext) -> StageContext:
        if not context.started:
            Log.warning(
                f"Document {context.document_id} {context.stage.value} rejected: "
                f"{context.error_message}"
            )
            return context
        document = self._store.get_document(context.document_id)
        if document.status == DocumentStatus.ANALYZING.value:
            status = DocumentLifecycle.fail(document.status, context.stage)
            document = self._store.update_document(document.id, status=status.value)
        context.document = document
        Log.error(
            f"Document {document.id} {context.stage.value} failed: {context.error_message}"
        )
        send_notification(
            self._notifications,
            self._store,
            self._caller,
            NotificationEvent(
                type=NotificationType.ERROR,
                document_name=document.name,
                message=f"{context.stage.value} failed for \"{document.name}\": "
                f"{context.error_message}",
            ),
            document_id=document.id,
            record_activity=False,
        )
        return context
