from pathlib import Path
from typing import Any

import pymupdf

from intake.ocr.base import BaseOcrEngine
from intake.ocr.exceptions import OcrError


class PyMuPdfOcrAdapter(BaseOcrEngine):
    """Extracts text with PyMuPDF, running Tesseract on pages without a text layer.

    PDFs with embedded text are read directly. Scanned pages and image files
    (PNG, JPEG, TIFF and the other formats PyMuPDF opens) go through
    ``get_textpage_ocr``, which requires a local Tesseract installation.
    """

    def __init__(self, dpi: int = 300) -> None:
        self._dpi = dpi

    def extract(self, path: Path, *, language: str) -> str:
        try:
            with pymupdf.open(path) as doc:  # type: ignore[no-untyped-call]
                pages = [self._page_text(page, language) for page in doc]
            return "\n".join(pages).strip()
        except OcrError:
            raise
        except Exception as exc:
            raise OcrError(f"pymupdf OCR failed: {exc}") from exc

    def _page_text(self, page: Any, language: str) -> str:
        text = page.get_text().strip()
        if text:
            return str(text)
        textpage = page.get_textpage_ocr(language=language, dpi=self._dpi, full=True)
        return str(page.get_text(textpage=textpage)).strip()
