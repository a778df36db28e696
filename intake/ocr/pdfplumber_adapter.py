from pathlib import Path

import pdfplumber

from intake.ocr.base import BaseOcrEngine
from intake.ocr.exceptions import OcrError


class PdfPlumberOcrAdapter(BaseOcrEngine):
    """Reads the embedded text layer of PDFs using pdfplumber.

    No recognition is performed, so scanned PDFs and images yield no text.
    """

    def extract(self, path: Path, *, language: str) -> str:
        _ = language
        try:
            with pdfplumber.open(path) as pdf:
                pages = [page.extract_text() or "" for page in pdf.pages]
            return "\n".join(pages).strip()
        except OcrError:
            raise
        except Exception as exc:
            raise OcrError(f"pdfplumber extraction failed: {exc}") from exc
