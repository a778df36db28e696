import io
import threading
from collections.abc import Callable, Generator
from datetime import datetime, timezone
from pathlib import Path

import pytest
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from intake.analysis.analyzer import Analyzer
from intake.analysis.base import BaseAnalyzer
from intake.analysis.example_client_adapter import ExampleClientAdapter
from intake.analysis.exceptions import AnalysisError
from intake.cloud_storage.base import BaseCloudStorage
from intake.cloud_storage.exceptions import CloudStorageError, RemoteFileNotFoundError
from intake.cloud_storage.models import RemoteFile, StorageStatus
from intake.config.settings import Settings
from intake.notification.base import BaseNotifier
from intake.notification.exceptions import NotificationError
from intake.notification.models import NotifierStatus
from intake.notification.service import NotificationService
from intake.ocr.base import BaseOcrEngine
from intake.ocr.exceptions import OcrError
from intake.processor.capability_call import CapabilityCaller
from intake.processor.document_locks import DocumentLocks
from intake.processor.file_store import UploadStore
from intake.processor.models import UploadedFile
from intake.processor.orchestrator import DocumentOrchestrator
from intake.processor.processor import StageProcessor
from intake.store.base import BaseDocumentStore
from intake.store.memory_store import InMemoryDocumentStore
from intake.worker.job_runner import JobRunner
from intake.worker.worker import Worker


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Generate a minimal single-page PDF with known text content."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Hello PDF World")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    """Generate a two-page PDF with known text on each page."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Page one content")
    c.showPage()
    c.drawString(72, 720, "Page two content")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def empty_pdf_bytes() -> bytes:
    """Generate a valid PDF with no text content (blank page)."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.showPage()
    c.save()
    return buf.getvalue()


class StaticOcrEngine(BaseOcrEngine):
    """Returns fixed text and remembers the languages it was asked for."""

    def __init__(self, text: str = "Quarterly revenue grew by 12 percent") -> None:
        self.text = text
        self.languages: list[str] = []

    def extract(self, path: Path, *, language: str) -> str:
        if not path.exists():
            raise OcrError(f"File not found: {path}")
        self.languages.append(language)
        return self.text


class FailingOcrEngine(BaseOcrEngine):
    def __init__(self) -> None:
        self.calls = 0

    def extract(self, path: Path, *, language: str) -> str:
        self.calls += 1
        raise OcrError("OCR engine crashed")


class BlockingOcrEngine(BaseOcrEngine):
    """Blocks inside ``extract`` until ``release`` is set."""

    def __init__(self) -> None:
        self.entered = threading.Event()
        self.release = threading.Event()

    def extract(self, path: Path, *, language: str) -> str:
        self.entered.set()
        self.release.wait(timeout=5)
        return "Text read after waiting"


class FailingAnalyzer(BaseAnalyzer):
    def __init__(self) -> None:
        self.calls = 0

    @property
    def model(self) -> str:
        return "failing-model"

    def analyze(self, text: str, *, media_type: str, instruction: str | None = None) -> str:
        self.calls += 1
        raise AnalysisError("AI provider API error: model overloaded")


class RecordingNotifier(BaseNotifier):
    name = "Recording"

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.messages: list[str] = []

    @property
    def is_configured(self) -> bool:
        return True

    def send_message(self, text: str) -> None:
        if self.fail:
            raise NotificationError("chat unreachable")
        self.messages.append(text)

    def status(self) -> NotifierStatus:
        return NotifierStatus(configured=True, connected=not self.fail, provider="recording")


class FakeCloudStorage(BaseCloudStorage):
    """Dict-backed cloud storage; ``fail_uploads`` makes every upload raise."""

    name = "Fake Storage"

    def __init__(self, fail_uploads: bool = False) -> None:
        self.fail_uploads = fail_uploads
        self.files: dict[str, tuple[RemoteFile, bytes]] = {}

    @property
    def is_configured(self) -> bool:
        return True

    def add(self, file_id: str, name: str, media_type: str, content: bytes) -> None:
        remote = RemoteFile(
            id=file_id,
            name=name,
            media_type=media_type,
            size=len(content),
            modified_at=datetime(2026, 1, 2, tzinfo=timezone.utc),
        )
        self.files[file_id] = (remote, content)

    def upload(self, path: Path, *, name: str, media_type: str) -> str:
        if self.fail_uploads:
            raise CloudStorageError("bucket is read-only")
        file_id = f"remote-{len(self.files) + 1}"
        self.add(file_id, name, media_type, path.read_bytes())
        return file_id

    def get_metadata(self, file_id: str) -> RemoteFile:
        if file_id not in self.files:
            raise RemoteFileNotFoundError(f"Remote file not found: {file_id}")
        return self.files[file_id][0]

    def download(self, file_id: str) -> bytes:
        if file_id not in self.files:
            raise RemoteFileNotFoundError(f"Remote file not found: {file_id}")
        return self.files[file_id][1]

    def list_files(self, limit: int = 100) -> list[RemoteFile]:
        return [remote for remote, _ in self.files.values()][:limit]

    def status(self) -> StorageStatus:
        return StorageStatus(configured=True, connected=True, provider="fake", location="test")


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        store_backend="memory",
        ocr_engine="example",
        analysis_provider="example",
        notification_provider="log",
        cloud_storage_provider="none",
        upload_dir=tmp_path / "uploads",
        background_workers=1,
        document_lock_timeout_seconds=1,
        capability_timeout_seconds=5,
        capability_max_attempts=3,
        capability_retry_wait_seconds=0,
    )


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def failing_notifier() -> RecordingNotifier:
    return RecordingNotifier(fail=True)


@pytest.fixture
def ocr_engine() -> StaticOcrEngine:
    return StaticOcrEngine()


@pytest.fixture
def failing_ocr_engine() -> FailingOcrEngine:
    return FailingOcrEngine()


@pytest.fixture
def blocking_ocr_engine() -> Generator[BlockingOcrEngine, None, None]:
    engine = BlockingOcrEngine()
    yield engine
    engine.release.set()


@pytest.fixture
def failing_analyzer() -> FailingAnalyzer:
    return FailingAnalyzer()


@pytest.fixture
def cloud_storage() -> FakeCloudStorage:
    return FakeCloudStorage()


@pytest.fixture
def failing_cloud_storage() -> FakeCloudStorage:
    return FakeCloudStorage(fail_uploads=True)


@pytest.fixture
def pdf_upload(sample_pdf_bytes: bytes) -> UploadedFile:
    return UploadedFile(name="Report.pdf", media_type="application/pdf", content=sample_pdf_bytes)


OrchestratorBuilder = Callable[..., DocumentOrchestrator]


@pytest.fixture
def make_orchestrator(
    settings: Settings,
    ocr_engine: StaticOcrEngine,
    notifier: RecordingNotifier,
) -> Generator[OrchestratorBuilder, None, None]:
    """Build an orchestrator around fakes. The worker is not started.

    Tests drain queued jobs on their own thread with ``worker.run(max_jobs=...)``.
    """
    built: list[DocumentOrchestrator] = []

    def build(
        *,
        store: BaseDocumentStore | None = None,
        ocr: BaseOcrEngine | None = None,
        analyzer: BaseAnalyzer | None = None,
        storage: BaseCloudStorage | None = None,
        chat: BaseNotifier | None = None,
        max_upload_bytes: int | None = None,
        lock_timeout_seconds: float | None = None,
    ) -> DocumentOrchestrator:
        store = store if store is not None else InMemoryDocumentStore()
        uploads = UploadStore(settings.upload_dir)
        engine = ocr if ocr is not None else ocr_engine
        analysis = analyzer if analyzer is not None else Analyzer(
            client=ExampleClientAdapter(), model="example"
        )
        notifications = NotificationService(chat if chat is not None else notifier)
        caller = CapabilityCaller(
            timeout_seconds=settings.capability_timeout_seconds,
            max_attempts=settings.capability_max_attempts,
            retry_wait_seconds=0,
        )
        locks = DocumentLocks(
            lock_timeout_seconds
            if lock_timeout_seconds is not None
            else settings.document_lock_timeout_seconds
        )
        processor = StageProcessor(
            store=store,
            uploads=uploads,
            ocr_engine=engine,
            analyzer=analysis,
            notifications=notifications,
            caller=caller,
            locks=locks,
        )
        orchestrator = DocumentOrchestrator(
            store=store,
            uploads=uploads,
            processor=processor,
            worker=Worker(JobRunner(processor), threads=1),
            ocr_engine=engine,
            cloud_storage=storage if storage is not None else FakeCloudStorage(),
            notifications=notifications,
            caller=caller,
            locks=locks,
            max_upload_bytes=(
                max_upload_bytes if max_upload_bytes is not None else settings.max_upload_bytes
            ),
            default_language=settings.ocr_default_language,
            storage_limit_bytes=settings.storage_limit_bytes,
        )
        built.append(orchestrator)
        return orchestrator

    yield build
    for orchestrator in built:
        orchestrator.shutdown()
