"""Example OCR adapter.

Use this module as a reference when adding new engines: implement
BaseOcrEngine and register the engine in OcrEngineFactory.
"""

from pathlib import Path

from intake.ocr.base import BaseOcrEngine
from intake.ocr.exceptions import OcrError


class ExampleOcrAdapter(BaseOcrEngine):
    """Returns fixed text for any existing file. No OCR engine required."""

    def __init__(self, text: str = "Example extracted text") -> None:
        self._text = text

    def extract(self, path: Path, *, language: str) -> str:
        _ = language
        if not path.exists():
            raise OcrError(f"File not found: {path}")
        return self._text
