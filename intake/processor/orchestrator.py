"""Entry points that drive documents through the intake pipeline."""

from pathlib import Path

from intake.analysis.base import BaseAnalyzer
from intake.analysis.factory import AnalyzerFactory
from intake.cloud_storage.base import BaseCloudStorage
from intake.cloud_storage.exceptions import CloudStorageNotConfiguredError
from intake.cloud_storage.factory import CloudStorageFactory
from intake.cloud_storage.models import RemoteFile
from intake.config.settings import Settings
from intake.database.models import (
    ActivityRecord,
    AnalysisRecord,
    DocumentRecord,
    NewActivity,
    NewDocument,
    Stats,
)
from intake.logging.logger import Log
from intake.notification.factory import NotifierFactory
from intake.notification.models import NotificationEvent, NotificationType
from intake.notification.service import NotificationService
from intake.ocr.base import BaseOcrEngine
from intake.ocr.exceptions import OcrEmptyResultError
from intake.ocr.factory import OcrEngineFactory
from intake.ocr.languages import resolve_language
from intake.processor.capability_call import CapabilityCaller
from intake.processor.document_locks import DocumentLocks
from intake.processor.exceptions import DocumentValidationError, UploadTooLargeError
from intake.processor.file_store import UploadStore
from intake.processor.models import (
    ActivityType,
    DocumentStatus,
    UploadedFile,
    UploadOptions,
)
from intake.processor.processor import StageProcessor
from intake.processor.steps import send_notification
from intake.store.base import BaseDocumentStore
from intake.store.factory import StoreFactory
from intake.worker.job_runner import JobRunner
from intake.worker.jobs import StageJob
from intake.worker.worker import Worker

DEFAULT_MEDIA_TYPE = "application/octet-stream"


class DocumentOrchestrator:
    """Creates documents and schedules or runs their OCR and analysis stages.

    Uploads that request OCR return immediately; the OCR stage (and, when
    requested, the analysis that follows it) runs as a job on ``worker``.
    Re-running analysis and the OCR tool path run synchronously and surface
    their failures to the caller after recording them on the document.
    """

    def __init__(
        self,
        *,
        store: BaseDocumentStore,
        uploads: UploadStore,
        processor: StageProcessor,
        worker: Worker,
        ocr_engine: BaseOcrEngine,
        cloud_storage: BaseCloudStorage,
        notifications: NotificationService,
        caller: CapabilityCaller,
        locks: DocumentLocks,
        max_upload_bytes: int,
        default_language: str = "eng",
        storage_limit_bytes: int = 10 * 1024 * 1024 * 1024,
    ) -> None:
        self._store = store
        self._uploads = uploads
        self._processor = processor
        self._worker = worker
        self._ocr_engine = ocr_engine
        self._cloud_storage = cloud_storage
        self._notifications = notifications
        self._caller = caller
        self._locks = locks
        self._max_upload_bytes = max_upload_bytes
        self._default_language = default_language
        self._storage_limit_bytes = storage_limit_bytes

    @property
    def store(self) -> BaseDocumentStore:
        return self._store

    @property
    def cloud_storage(self) -> BaseCloudStorage:
        return self._cloud_storage

    @property
    def notifications(self) -> NotificationService:
        return self._notifications

    @property
    def worker(self) -> Worker:
        return self._worker

    # Lifecycle

    def start(self) -> None:
        """Fail documents stranded by a previous process, then start the worker."""
        self.recover_stalled_documents()
        self._worker.start()

    def shutdown(self) -> None:
        self._worker.stop()
        self._caller.close()

    def recover_stalled_documents(self) -> int:
        count = self._store.fail_documents_in_status(
            DocumentStatus.ANALYZING.value,
            DocumentStatus.ERROR.value,
        )
        if count:
            Log.warning(f"Marked {count} documents left in analyzing as error")
        return count

    # Commands

    def create_from_upload(
        self,
        file: UploadedFile | None,
        options: UploadOptions | None = None,
    ) -> DocumentRecord:
        """Store an upload and schedule its OCR job when requested.

        Raises:
            DocumentValidationError: if the file is missing, unnamed or empty.
            UploadTooLargeError: if the file exceeds the upload limit.
        """
        options = options or UploadOptions()
        upload = self._validate_upload(file)
        stored = self._uploads.save(upload.name, upload.content)
        document = self._store.create_document(
            NewDocument(
                name=upload.name,
                type=upload.media_type or DEFAULT_MEDIA_TYPE,
                size=upload.size,
                url=stored.url,
            )
        )
        Log.info(f"Document {document.id} created from upload {upload.name!r}")

        if options.store_in_drive:
            document = self._copy_to_cloud_storage(document, stored.path)

        self._store.create_activity(
            NewActivity(
                type=ActivityType.UPLOAD.value,
                description="Document uploaded",
                document_id=document.id,
                document_name=document.name,
            )
        )
        send_notification(
            self._notifications,
            self._store,
            self._caller,
            NotificationEvent(type=NotificationType.UPLOAD, document_name=document.name),
            document_id=document.id,
        )

        if options.run_ocr:
            self._worker.submit(
                StageJob(
                    document_id=document.id,
                    language=self._default_language,
                    cascade_analysis=options.run_analysis,
                )
            )
        return document

    def schedule_ocr(self, document_id: int, language: str | None = None) -> DocumentRecord:
        """Queue an OCR re-run that never cascades into analysis.

        Raises:
            DocumentNotFoundError: if the document does not exist.
            DocumentValidationError: if it has no stored file or the language is unknown.
        """
        code = resolve_language(language, self._default_language)
        document = self._store.get_document(document_id)
        if not document.url:
            raise DocumentValidationError(f"Document {document_id} has no stored file")
        self._worker.submit(StageJob(document_id=document_id, language=code))
        return document

    def run_ocr(self, document_id: int, language: str | None = None) -> DocumentRecord:
        """Run OCR now and return the document with its extracted content."""
        code = resolve_language(language, self._default_language)
        return self._processor.run_ocr(document_id, code)

    def extract_text(self, file: UploadedFile | None, language: str | None = None) -> str:
        """Run OCR on a file without creating or touching any record."""
        code = resolve_language(language, self._default_language)
        upload = self._validate_upload(file)
        with self._uploads.temporary(upload.name, upload.content) as path:
            text = self._caller.call("ocr", self._ocr_engine.extract, path, language=code)
        if not text.strip():
            raise OcrEmptyResultError(f"OCR found no text in {upload.name!r}")
        return text

    def run_analysis(self, document_id: int, instruction: str | None = None) -> AnalysisRecord:
        """Analyze the document's content now and return the new Analysis.

        Raises:
            DocumentNotFoundError: if the document does not exist.
            MissingContentError: if the document has no extracted text.
            AnalysisError: if the provider fails; the document is left in ``error``.
        """
        return self._processor.run_analysis(document_id, instruction)

    def import_from_external_storage(self, external_file_id: str) -> DocumentRecord:
        """Copy a cloud storage file into the upload directory as a new pending document.

        Raises:
            CloudStorageNotConfiguredError: if no cloud storage is configured.
            DocumentValidationError: if the id is blank.
            CloudStorageError: if the file cannot be fetched.
        """
        if not self._cloud_storage.is_configured:
            raise CloudStorageNotConfiguredError("Cloud storage is not configured")
        file_id = (external_file_id or "").strip()
        if not file_id:
            raise DocumentValidationError("File ID is required")

        remote = self._caller.call("cloud_storage", self._cloud_storage.get_metadata, file_id)
        content = self._caller.call("cloud_storage", self._cloud_storage.download, file_id)
        if len(content) > self._max_upload_bytes:
            raise UploadTooLargeError(
                f"File {remote.name!r} exceeds the {self._max_upload_bytes}-byte upload limit"
            )
        stored = self._uploads.save(remote.name, content)
        document = self._store.create_document(
            NewDocument(
                name=remote.name,
                type=remote.media_type or DEFAULT_MEDIA_TYPE,
                size=len(content),
                url=stored.url,
                drive_id=file_id,
            )
        )
        self._store.create_activity(
            NewActivity(
                type=ActivityType.UPLOAD.value,
                description="Document imported from cloud storage",
                document_id=document.id,
                document_name=document.name,
            )
        )
        Log.info(f"Document {document.id} imported from cloud storage file {file_id}")
        return document

    def delete_document(self, document_id: int) -> None:
        """Delete the document, its analyses and activities, then its local file."""
        with self._locks.hold(document_id):
            document = self._store.get_document(document_id)
            self._store.delete_document(document_id)
        if document.url:
            self._uploads.delete(document.url)
        Log.info(f"Document {document_id} deleted")

    def list_external_files(self, limit: int = 100) -> list[RemoteFile]:
        if not self._cloud_storage.is_configured:
            raise CloudStorageNotConfiguredError("Cloud storage is not configured")
        return self._caller.call("cloud_storage", self._cloud_storage.list_files, limit)

    # Queries

    def get_document(self, document_id: int) -> DocumentRecord:
        return self._store.get_document(document_id)

    def list_documents(self) -> list[DocumentRecord]:
        return self._store.list_documents()

    def list_recent_documents(self, limit: int = 5) -> list[DocumentRecord]:
        return self._store.list_recent_documents(limit)

    def search_documents(self, query: str) -> list[DocumentRecord]:
        if not query.strip():
            raise DocumentValidationError("Search query is required")
        return self._store.search_documents(query.strip())

    def list_recent_analyses(self, limit: int = 5) -> list[AnalysisRecord]:
        return self._store.list_recent_analyses(limit)

    def list_document_analyses(self, document_id: int) -> list[AnalysisRecord]:
        self._store.get_document(document_id)
        return self._store.list_document_analyses(document_id)

    def list_recent_activities(self, limit: int = 5) -> list[ActivityRecord]:
        return self._store.list_recent_activities(limit)

    def get_stats(self) -> Stats:
        return self._store.get_stats(self._storage_limit_bytes)

    def _validate_upload(self, file: UploadedFile | None) -> UploadedFile:
        if file is None:
            raise DocumentValidationError("No file uploaded")
        if not file.name.strip():
            raise DocumentValidationError("Uploaded file has no name")
        if file.size == 0:
            raise DocumentValidationError(f"Uploaded file {file.name!r} is empty")
        if file.size > self._max_upload_bytes:
            raise UploadTooLargeError(
                f"File {file.name!r} exceeds the {self._max_upload_bytes}-byte upload limit"
            )
        return file

    def _copy_to_cloud_storage(self, document: DocumentRecord, path: str) -> DocumentRecord:
        try:
            drive_id = self._caller.call(
                "cloud_storage",
                self._cloud_storage.upload,
                Path(path),
                name=document.name,
                media_type=document.type,
            )
            return self._store.update_document(document.id, drive_id=drive_id)
        except Exception as exc:
            Log.warning(f"Cloud storage upload failed for document {document.id}: {exc}")
            return document


def build_orchestrator(
    settings: Settings,
    store: BaseDocumentStore | None = None,
) -> DocumentOrchestrator:
    """Build a DocumentOrchestrator with all required adapters."""
    store = store if store is not None else StoreFactory.create(settings)
    uploads = UploadStore(settings.upload_dir)
    ocr_engine = OcrEngineFactory.create(settings)
    analyzer: BaseAnalyzer = AnalyzerFactory.create(settings)
    notifications = NotifierFactory.create(settings)
    cloud_storage = CloudStorageFactory.create(settings)
    caller = CapabilityCaller(
        timeout_seconds=settings.capability_timeout_seconds,
        max_attempts=settings.capability_max_attempts,
        retry_wait_seconds=settings.capability_retry_wait_seconds,
    )
    locks = DocumentLocks(settings.document_lock_timeout_seconds)
    processor = StageProcessor(
        store=store,
        uploads=uploads,
        ocr_engine=ocr_engine,
        analyzer=analyzer,
        notifications=notifications,
        caller=caller,
        locks=locks,
    )
    worker = Worker(JobRunner(processor), threads=settings.background_workers)
    return DocumentOrchestrator(
        store=store,
        uploads=uploads,
        processor=processor,
        worker=worker,
        ocr_engine=ocr_engine,
        cloud_storage=cloud_storage,
        notifications=notifications,
        caller=caller,
        locks=locks,
        max_upload_bytes=settings.max_upload_bytes,
        default_language=settings.ocr_default_language,
        storage_limit_bytes=settings.storage_limit_bytes,
    )
