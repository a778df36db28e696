"""Document lifecycle transitions.

Every status change made by the pipeline goes through ``transition`` so the
rules live in one table instead of being repeated at each entry point.
"""

from enum import Enum
from typing import ClassVar

from intake.processor.exceptions import InvalidTransitionError
from intake.processor.models import DocumentStatus, Stage


class LifecycleEvent(str, Enum):
    START_OCR = "start_ocr"
    OCR_SUCCEEDED = "ocr_succeeded"
    OCR_FAILED = "ocr_failed"
    START_ANALYSIS = "start_analysis"
    ANALYSIS_SUCCEEDED = "analysis_succeeded"
    ANALYSIS_FAILED = "analysis_failed"


class DocumentLifecycle:
    """Transition table for the document status field."""

    INITIAL_STATUS: ClassVar[DocumentStatus] = DocumentStatus.PENDING

    TRANSITIONS: ClassVar[dict[tuple[DocumentStatus, LifecycleEvent], DocumentStatus]] = {
        (DocumentStatus.PENDING, LifecycleEvent.START_OCR): DocumentStatus.ANALYZING,
        (DocumentStatus.PROCESSED, LifecycleEvent.START_OCR): DocumentStatus.ANALYZING,
        (DocumentStatus.ERROR, LifecycleEvent.START_OCR): DocumentStatus.ANALYZING,
        (DocumentStatus.ANALYZING, LifecycleEvent.OCR_SUCCEEDED): DocumentStatus.PROCESSED,
        (DocumentStatus.ANALYZING, LifecycleEvent.OCR_FAILED): DocumentStatus.ERROR,
        (DocumentStatus.PENDING, LifecycleEvent.START_ANALYSIS): DocumentStatus.ANALYZING,
        (DocumentStatus.PROCESSED, LifecycleEvent.START_ANALYSIS): DocumentStatus.ANALYZING,
        (DocumentStatus.ERROR, LifecycleEvent.START_ANALYSIS): DocumentStatus.ANALYZING,
        (DocumentStatus.ANALYZING, LifecycleEvent.ANALYSIS_SUCCEEDED): DocumentStatus.PROCESSED,
        (DocumentStatus.ANALYZING, LifecycleEvent.ANALYSIS_FAILED): DocumentStatus.ERROR,
    }

    START_EVENTS: ClassVar[dict[Stage, LifecycleEvent]] = {
        Stage.OCR: LifecycleEvent.START_OCR,
        Stage.ANALYSIS: LifecycleEvent.START_ANALYSIS,
    }
    SUCCESS_EVENTS: ClassVar[dict[Stage, LifecycleEvent]] = {
        Stage.OCR: LifecycleEvent.OCR_SUCCEEDED,
        Stage.ANALYSIS: LifecycleEvent.ANALYSIS_SUCCEEDED,
    }
    FAILURE_EVENTS: ClassVar[dict[Stage, LifecycleEvent]] = {
        Stage.OCR: LifecycleEvent.OCR_FAILED,
        Stage.ANALYSIS: LifecycleEvent.ANALYSIS_FAILED,
    }

    @classmethod
    def transition(cls, current: str | DocumentStatus, event: LifecycleEvent) -> DocumentStatus:
        """Return the status reached by applying ``event`` to ``current``.

        Raises:
            InvalidTransitionError: if the event is not allowed from ``current``.
        """
        try:
            status = DocumentStatus(current)
        except ValueError as exc:
            raise InvalidTransitionError(f"Unknown document status '{current}'") from exc
        target = cls.TRANSITIONS.get((status, event))
        if target is None:
            raise InvalidTransitionError(
                f"Cannot apply '{event.value}' to a document in status '{status.value}'"
            )
        return target

    @classmethod
    def can_start(cls, current: str | DocumentStatus, stage: Stage) -> bool:
        try:
            status = DocumentStatus(current)
        except ValueError:
            return False
        return (status, cls.START_EVENTS[stage]) in cls.TRANSITIONS

    @classmethod
    def start(cls, current: str | DocumentStatus, stage: Stage) -> DocumentStatus:
        return cls.transition(current, cls.START_EVENTS[stage])

    @classmethod
    def succeed(cls, current: str | DocumentStatus, stage: Stage) -> DocumentStatus:
        return cls.transition(current, cls.SUCCESS_EVENTS[stage])

    @classmethod
    def fail(cls, current: str | DocumentStatus, stage: Stage) -> DocumentStatus:
        return cls.transition(current, cls.FAILURE_EVENTS[stage])
