from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from intake.database.models import AnalysisRecord, DocumentRecord
from intake.logging.logger import Log
from intake.processor.models import Stage


@dataclass(slots=True)
class StageContext:
    document_id: int
    stage: Stage
    language: str = "eng"
    instruction: str | None = None
    document: DocumentRecord | None = None
    file_path: Path | None = None
    started: bool = False
    extracted_text: str = ""
    analysis_text: str = ""
    analysis: AnalysisRecord | None = None
    error_message: str = ""

    def require_document(self) -> DocumentRecord:
        if self.document is None:
            raise ValueError("StageContext.document must be loaded before this step")
        return self.document


class PipelineStep(ABC):
    @abstractmethod
    def run(self, context: StageContext) -> StageContext:
        raise NotImplementedError


class StagePipeline:
    """Runs steps in order; on any failure runs ``failed_step`` and re-raises."""

    def __init__(self, steps: Sequence[PipelineStep], failed_step: PipelineStep) -> None:
        self._steps = list(steps)
        self._failed_step = failed_step

    def run(self, context: StageContext) -> StageContext:
        try:
            for step in self._steps:
                context = step.run(context)
        except Exception as exc:
            context.error_message = str(exc) or type(exc).__name__
            self._run_failed_step(context)
            raise
        return context

    def _run_failed_step(self, context: StageContext) -> None:
        try:
            self._failed_step.run(context)
        except Exception as exc:
            Log.exception(
                f"Could not record {context.stage.value} failure for document "
                f"{context.document_id}: {exc}"
            )
