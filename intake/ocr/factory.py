from intake.config.settings import Settings
from intake.ocr.base import BaseOcrEngine
from intake.ocr.example_adapter import ExampleOcrAdapter
from intake.ocr.pdfplumber_adapter import PdfPlumberOcrAdapter
from intake.ocr.pymupdf_adapter import PyMuPdfOcrAdapter


class OcrEngineFactory:
    """Creates the correct OCR engine based on settings."""

    ENGINES: tuple[str, ...] = ("pymupdf", "pdfplumber", "example")

    @classmethod
    def create(cls, settings: Settings) -> BaseOcrEngine:
        engine = settings.ocr_engine.lower()
        if engine == "pymupdf":
            return PyMuPdfOcrAdapter(dpi=settings.ocr_dpi)
        if engine == "pdfplumber":
            return PdfPlumberOcrAdapter()
        if engine == "example":
            return ExampleOcrAdapter()
        raise ValueError(f"Unknown OCR engine '{engine}'. Choose from: {list(cls.ENGINES)}")
