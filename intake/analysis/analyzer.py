"""AI-powered document analyzer."""

from pathlib import Path
from typing import ClassVar

from intake.analysis.base import BaseAnalyzer
from intake.analysis.client_base import BaseAnalysisClient
from intake.analysis.prompt_loader import load_prompt_template
from intake.logging.logger import Log


class Analyzer(BaseAnalyzer):
    """Summarises extracted document text using an AI provider."""

    DOCUMENT_CONTEXT: ClassVar[str] = (
        "This is a document that may contain business or technical information. "
    )
    IMAGE_CONTEXT: ClassVar[str] = (
        "This is text extracted from an image using OCR. "
        "There might be some errors in the text. "
    )

    def __init__(
        self,
        *,
        client: BaseAnalysisClient,
        model: str,
        temperature: float = 0.3,
        max_tokens: int = 2000,
        prompt_template_path: Path | None = None,
    ) -> None:
        self._client = client
        self._model = model
        self._temperature = max(0.0, min(2.0, temperature))
        self._max_tokens = max_tokens
        self._prompt_template = load_prompt_template(prompt_template_path)

    @property
    def model(self) -> str:
        return self._model

    def analyze(self, text: str, *, media_type: str, instruction: str | None = None) -> str:
        """Send the document text to the provider and return its analysis."""
        system_prompt = self.build_system_prompt(media_type, instruction)
        Log.debug(f"Analysis system prompt:\n{system_prompt}")

        result = self._client.create_chat_completion(
            model=self._model,
            temperature=self._temperature,
            max_tokens=self._max_tokens,
            system_prompt=system_prompt,
            user_prompt=text,
        )
        Log.info(f"Analysis complete: {len(result)} chars from model {self._model}")
        return result

    def build_system_prompt(self, media_type: str, instruction: str | None = None) -> str:
        prompt = self._prompt_template.format(
            document_context=self._document_context(media_type),
        ).rstrip("\n")
        if instruction and instruction.strip():
            prompt += (
                "\n\nAdditionally, the user has requested the following specific analysis: "
                + instruction.strip()
            )
        return prompt

    @classmethod
    def _document_context(cls, media_type: str) -> str:
        lowered = media_type.lower()
        if "pdf" in lowered or "doc" in lowered:
            return cls.DOCUMENT_CONTEXT
        if "image" in lowered:
            return cls.IMAGE_CONTEXT
        return ""
