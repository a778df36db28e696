from intake.processor.exceptions import CapabilityError, DocumentValidationError


class OcrError(CapabilityError):
    """Raised when text extraction fails."""

    capability = "ocr"


class OcrEmptyResultError(OcrError):
    """Raised when extraction finished but produced no text."""


class UnsupportedLanguageError(DocumentValidationError):
    """Raised when an OCR language code is not in the supported list."""
