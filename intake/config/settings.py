from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 5000

    store_backend: str = "memory"

    db_host: str = "host.docker.internal"
    db_port: int = 5432
    db_database: str = "intake"
    db_username: str = "intake"
    db_password: str = "secret"
    db_pool_min_size: int = 1
    db_pool_max_size: int = 10
    db_connect_timeout_seconds: float = 10.0

    upload_dir: Path = Path("uploads")
    max_upload_bytes: int = 10 * 1024 * 1024
    storage_limit_bytes: int = 10 * 1024 * 1024 * 1024

    background_workers: int = 2
    document_lock_timeout_seconds: float = 30.0
    capability_timeout_seconds: float = 120.0
    capability_max_attempts: int = 3
    capability_retry_wait_seconds: float = 0.5

    ocr_engine: str = "pymupdf"
    ocr_default_language: str = "eng"
    ocr_dpi: int = 300

    analysis_provider: str = "openai"
    analysis_temperature: float = 0.3
    analysis_max_tokens: int = 2000

    analysis_openai_api_key: str = ""
    analysis_openai_model_name: str = "gpt-4o"
    analysis_openai_timeout_seconds: int = 60

    analysis_openai_compatible_api_key: str = ""
    analysis_openai_compatible_base_url: str = ""
    analysis_openai_compatible_model_name: str = ""
    analysis_openai_compatible_timeout_seconds: int = 60

    analysis_openrouter_api_key: str = ""
    analysis_openrouter_model_name: str = ""
    analysis_groq_api_key: str = ""
    analysis_groq_model_name: str = ""
    analysis_together_api_key: str = ""
    analysis_together_model_name: str = ""
    analysis_deepseek_api_key: str = ""
    analysis_deepseek_model_name: str = ""
    analysis_ollama_api_key: str = "ollama"
    analysis_ollama_model_name: str = ""

    cloud_storage_provider: str = "none"
    cloud_storage_endpoint_url: str = ""
    cloud_storage_region: str = "auto"
    cloud_storage_bucket: str = ""
    cloud_storage_access_key_id: str = ""
    cloud_storage_secret_access_key: str = ""
    cloud_storage_prefix: str = "intake/"
    cloud_storage_timeout_seconds: int = 30

    notification_provider: str = "log"
    telegram_bot_token: str = ""
    telegram_chat_id: str = ""
    telegram_api_base_url: str = "https://api.telegram.org"
    telegram_timeout_seconds: int = 10

    notify_enabled: bool = True
    notify_on_upload: bool = True
    notify_on_ocr_complete: bool = True
    notify_on_analysis_complete: bool = True
    notify_daily_summary: bool = False
