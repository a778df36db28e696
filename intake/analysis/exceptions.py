from intake.processor.exceptions import CapabilityError, TransientCapabilityError


class AnalysisError(CapabilityError):
    """Raised when document analysis fails."""

    capability = "analysis"


class AnalysisNetworkError(AnalysisError, TransientCapabilityError):
    """Raised when the AI provider call fails due to network/infrastructure issues."""
