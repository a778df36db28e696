from abc import ABC, abstractmethod


class BaseAnalyzer(ABC):
    """Contract for all analysis adapters."""

    @property
    @abstractmethod
    def model(self) -> str:
        """Identifier of the model recorded on each Analysis."""

    @abstractmethod
    def analyze(self, text: str, *, media_type: str, instruction: str | None = None) -> str:
        """Produce analysis text for a document's extracted content.

        Args:
            text: Extracted document text.
            media_type: Media type of the source file; shapes the system prompt.
            instruction: Optional user request appended to the brief.

        Returns:
            The generated analysis as plain text.

        Raises:
            AnalysisError: on any failure.
        """
