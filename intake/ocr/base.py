from abc import ABC, abstractmethod
from pathlib import Path


class BaseOcrEngine(ABC):
    """Contract for all OCR adapters."""

    @abstractmethod
    def extract(self, path: Path, *, language: str) -> str:
        """Extract plain text from a document or image file.

        Args:
            path: Location of the file on local disk.
            language: Tesseract language code, e.g. ``eng`` or ``chi_sim``.

        Returns:
            Extracted text as a single stripped string. May be empty when the
            file holds no recognisable text.

        Raises:
            OcrError: if extraction fails for any reason.
        """
