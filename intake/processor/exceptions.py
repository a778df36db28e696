class ProcessorError(Exception):
    """Base exception for all processor-related errors."""


class DocumentValidationError(ProcessorError):
    """Raised when a request is rejected before any state is mutated."""


class UploadTooLargeError(DocumentValidationError):
    """Raised when an upload exceeds the configured size limit."""


class MissingContentError(DocumentValidationError):
    """Raised when analysis is requested for a document without extracted text."""


class DocumentNotFoundError(ProcessorError):
    """Raised when a document cannot be found in the store."""


class AnalysisNotFoundError(ProcessorError):
    """Raised when an analysis cannot be found in the store."""


class ServiceConnectionNotFoundError(ProcessorError):
    """Raised when a service connection cannot be found in the store."""


class ImmutableFieldError(ProcessorError):
    """Raised when an update targets a field fixed at creation."""


class InvalidTransitionError(ProcessorError):
    """Raised when a lifecycle event is not allowed from the current status."""


class StageInProgressError(ProcessorError):
    """Raised when another stage holds the document for longer than the lock timeout."""


class CapabilityError(ProcessorError):
    """Base for failures of an external capability (OCR, analysis, storage, notification)."""

    capability: str = "capability"


class TransientCapabilityError(CapabilityError):
    """A capability failure worth retrying (network, rate limit, timeout)."""


class CapabilityTimeoutError(TransientCapabilityError):
    """Raised when a capability call exceeds its deadline."""


class FileReadError(ProcessorError):
    """Raised when a stored upload cannot be read from disk."""
