from intake.analysis.base import BaseAnalyzer
from intake.database.models import AnalysisRecord, DocumentRecord
from intake.logging.logger import Log
from intake.notification.models import NotificationType
from intake.notification.service import NotificationService
from intake.ocr.base import BaseOcrEngine
from intake.processor.capability_call import CapabilityCaller
from intake.processor.document_locks import DocumentLocks
from intake.processor.file_store import UploadStore
from intake.processor.models import ActivityType, Stage
from intake.processor.pipeline import StageContext, StagePipeline
from intake.processor.steps import (
    AnalyzeStep,
    ExtractTextStep,
    LoadDocumentStep,
    MarkFailedStep,
    NotifyStep,
    PersistAnalysisStep,
    PersistOcrResultStep,
    RecordActivityStep,
    RequireContentStep,
    ResolveFileStep,
    StartStageStep,
)
from intake.store.base import BaseDocumentStore
from intake.worker.jobs import StageJob


class StageProcessor:
    """Runs the OCR and analysis stages for one document at a time.

    OCR: load -> resolve file -> start -> extract -> persist -> activity -> notify.
    Analysis: load -> require content -> start -> analyze -> persist -> activity -> notify.
    Every stage runs while holding the document's lock.
    """

    def __init__(
        self,
        *,
        store: BaseDocumentStore,
        uploads: UploadStore,
        ocr_engine: BaseOcrEngine,
        analyzer: BaseAnalyzer,
        notifications: NotificationService,
        caller: CapabilityCaller,
        locks: DocumentLocks,
    ) -> None:
        self._locks = locks
        failed_step = MarkFailedStep(store, notifications, caller)
        self._ocr_pipeline = StagePipeline(
            steps=[
                LoadDocumentStep(store),
                ResolveFileStep(uploads),
                StartStageStep(store),
                ExtractTextStep(ocr_engine, caller),
                PersistOcrResultStep(store),
                RecordActivityStep(store, ActivityType.OCR, "OCR processing completed"),
                NotifyStep(notifications, store, caller, NotificationType.OCR_COMPLETE),
            ],
            failed_step=failed_step,
        )
        self._analysis_pipeline = StagePipeline(
            steps=[
                LoadDocumentStep(store),
                RequireContentStep(),
                StartStageStep(store),
                AnalyzeStep(analyzer, caller),
                PersistAnalysisStep(store, analyzer),
                RecordActivityStep(store, ActivityType.ANALYSIS, "AI analysis completed"),
                NotifyStep(notifications, store, caller, NotificationType.ANALYSIS_COMPLETE),
            ],
            failed_step=failed_step,
        )

    def run_ocr(self, document_id: int, language: str) -> DocumentRecord:
        """Run OCR and return the updated document. Failures are re-raised."""
        with self._locks.hold(document_id):
            context = self._ocr_pipeline.run(
                StageContext(document_id=document_id, stage=Stage.OCR, language=language)
            )
        return context.require_document()

    def run_analysis(self, document_id: int, instruction: str | None = None) -> AnalysisRecord:
        """Run analysis and return the new Analysis. Failures are re-raised."""
        with self._locks.hold(document_id):
            context = self._analysis_pipeline.run(
                StageContext(
                    document_id=document_id,
                    stage=Stage.ANALYSIS,
                    instruction=instruction,
                )
            )
        if context.analysis is None:
            raise ValueError("Analysis pipeline finished without an analysis record")
        return context.analysis

    def process(self, job: StageJob) -> None:
        """Run a queued job: OCR, then analysis when the job cascades.

        Waits for the document's lock without a timeout; an accepted job always runs.
        """
        Log.info(f"Processing OCR job for document {job.document_id}")
        with self._locks.hold(job.document_id, wait=True):
            self.run_ocr(job.document_id, job.language)
            if job.cascade_analysis:
                self.run_analysis(job.document_id)
