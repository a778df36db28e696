from dataclasses import dataclass
from typing import ClassVar

from intake.analysis.analyzer import Analyzer
from intake.analysis.base import BaseAnalyzer
from intake.analysis.example_client_adapter import ExampleClientAdapter
from intake.analysis.openai_client_adapter import OpenAIClientAdapter
from intake.config.settings import Settings


@dataclass(frozen=True)
class ProviderConfig:
    """Connection details for one OpenAI-compatible chat endpoint."""

    api_key: str
    model: str
    timeout_seconds: int
    base_url: str | None = None


class AnalyzerFactory:
    """Creates the configured analyzer.

    Every real provider speaks the OpenAI chat API; hosted presets differ
    only in base URL, key and model name.
    """

    HOSTED_BASE_URLS: ClassVar[dict[str, str]] = {
        "openrouter": "https://openrouter.ai/api/v1",
        "groq": "https://api.groq.com/openai/v1",
        "together": "https://api.together.xyz/v1",
        "deepseek": "https://api.deepseek.com/v1",
        "ollama": "http://localhost:11434/v1",
    }

    @classmethod
    def create(cls, settings: Settings) -> BaseAnalyzer:
        provider = settings.analysis_provider.lower()
        if provider == "example":
            return Analyzer(client=ExampleClientAdapter(), model="example")
        config = cls.provider_config(provider, settings)
        client = OpenAIClientAdapter(
            api_key=config.api_key,
            timeout_seconds=config.timeout_seconds,
            base_url=config.base_url,
        )
        return Analyzer(
            client=client,
            model=config.model,
            temperature=settings.analysis_temperature,
            max_tokens=settings.analysis_max_tokens,
        )

    @classmethod
    def provider_config(cls, provider: str, settings: Settings) -> ProviderConfig:
        """Resolve key, model, timeout and base URL for ``provider``.

        Providers without their own model name fall back to the OpenAI one.

        Raises:
            ValueError: for an unknown provider, or ``openai_compatible``
                without ``analysis_openai_compatible_base_url``.
        """
        fallback_model = settings.analysis_openai_model_name
        if provider == "openai":
            return ProviderConfig(
                api_key=settings.analysis_openai_api_key,
                model=fallback_model,
                timeout_seconds=settings.analysis_openai_timeout_seconds,
            )
        if provider == "openai_compatible":
            base_url = settings.analysis_openai_compatible_base_url.strip()
            if not base_url:
                raise ValueError(
                    "analysis_openai_compatible_base_url is required for "
                    "analysis_provider=openai_compatible"
                )
            return ProviderConfig(
                api_key=settings.analysis_openai_compatible_api_key,
                model=settings.analysis_openai_compatible_model_name or fallback_model,
                timeout_seconds=settings.analysis_openai_compatible_timeout_seconds,
                base_url=base_url,
            )
        base_url = cls.HOSTED_BASE_URLS.get(provider)
        if base_url is None:
            supported = ["example", "openai", "openai_compatible", *sorted(cls.HOSTED_BASE_URLS)]
            raise ValueError(f"Unknown analysis provider '{provider}'. Choose from: {supported}")
        # Hosted presets read analysis_<provider>_api_key / analysis_<provider>_model_name.
        return ProviderConfig(
            api_key=getattr(settings, f"analysis_{provider}_api_key"),
            model=getattr(settings, f"analysis_{provider}_model_name") or fallback_model,
            timeout_seconds=settings.analysis_openai_timeout_seconds,
            base_url=base_url,
        )
