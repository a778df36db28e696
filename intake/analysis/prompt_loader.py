from pathlib import Path

from intake.analysis.exceptions import AnalysisError

DEFAULT_PROMPT_PATH = Path(__file__).parent / "prompts" / "analysis_prompt.txt"
CONTEXT_PLACEHOLDER = "{document_context}"


def load_prompt_template(path: Path | None = None) -> str:
    """Read the analysis system prompt.

    The template must contain ``{document_context}``, which the analyzer fills
    with a sentence describing where the text came from (document or OCR scan).

    Raises:
        AnalysisError: if the file cannot be read or lacks the placeholder.
    """
    source = path or DEFAULT_PROMPT_PATH
    try:
        template = source.read_text(encoding="utf-8")
    except OSError as exc:
        raise AnalysisError(f"Failed to load prompt template: {exc}") from exc
    if CONTEXT_PLACEHOLDER not in template:
        raise AnalysisError(f"Prompt template {source.name} has no {CONTEXT_PLACEHOLDER} slot")
    return template
