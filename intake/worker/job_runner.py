from typing import Protocol

from intake.logging.logger import Log
from intake.worker.jobs import StageJob


class JobProcessor(Protocol):
    def process(self, job: StageJob) -> None: ...


class JobRunner:
    """Run one job and contain its failure.

    The document's status already records the outcome, so a failed job is
    logged and dropped rather than retried.
    """

    def __init__(self, processor: JobProcessor) -> None:
        self._processor = processor

    def run(self, job: StageJob) -> bool:
        """Execute a single job. Returns True when it completed successfully."""
        Log.info(
            "Running stage job",
            document_id=job.document_id,
            cascade_analysis=job.cascade_analysis,
        )
        try:
            self._processor.process(job)
        except Exception as exc:
            Log.error(f"Job for document {job.document_id} failed: {exc}")
            return False
        Log.info("Stage job completed", document_id=job.document_id)
        return True
