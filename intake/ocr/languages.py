from intake.ocr.exceptions import UnsupportedLanguageError

SUPPORTED_LANGUAGES: dict[str, str] = {
    "eng": "English",
    "fra": "French",
    "deu": "German",
    "spa": "Spanish",
    "ita": "Italian",
    "por": "Portuguese",
    "rus": "Russian",
    "jpn": "Japanese",
    "chi_sim": "Chinese (Simplified)",
    "chi_tra": "Chinese (Traditional)",
    "kor": "Korean",
    "ara": "Arabic",
    "hin": "Hindi",
}


def list_languages() -> list[dict[str, str]]:
    """Supported languages as ``{"code", "name"}`` pairs in display order."""
    return [{"code": code, "name": name} for code, name in SUPPORTED_LANGUAGES.items()]


def resolve_language(language: str | None, default: str) -> str:
    """Return a supported language code, falling back to ``default`` when blank.

    Raises:
        UnsupportedLanguageError: if the code is not supported.
    """
    code = (language or "").strip() or default
    if code not in SUPPORTED_LANGUAGES:
        raise UnsupportedLanguageError(
            f"Unsupported OCR language '{code}'. Choose from: {list(SUPPORTED_LANGUAGES)}"
        )
    return code
