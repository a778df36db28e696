from intake.config.settings import Settings
from intake.notification.base import BaseNotifier
from intake.notification.log_adapter import LogNotifier
from intake.notification.models import NotificationPreferences
from intake.notification.service import NotificationService
from intake.notification.telegram_adapter import TelegramNotifier


class NotifierFactory:
    """Creates the configured notifier and wraps it with default preferences."""

    PROVIDERS: tuple[str, ...] = ("log", "telegram")

    @classmethod
    def create(cls, settings: Settings) -> NotificationService:
        return NotificationService(
            notifier=cls.create_notifier(settings),
            preferences=NotificationPreferences(
                enabled=settings.notify_enabled,
                on_upload=settings.notify_on_upload,
                on_ocr_complete=settings.notify_on_ocr_complete,
                on_analysis_complete=settings.notify_on_analysis_complete,
                daily_summary=settings.notify_daily_summary,
            ),
        )

    @classmethod
    def create_notifier(cls, settings: Settings) -> BaseNotifier:
        provider = settings.notification_provider.lower()
        if provider == "log":
            return LogNotifier()
        if provider == "telegram":
            return TelegramNotifier(
                bot_token=settings.telegram_bot_token,
                chat_id=settings.telegram_chat_id,
                api_base_url=settings.telegram_api_base_url,
                timeout_seconds=settings.telegram_timeout_seconds,
            )
        raise ValueError(
            f"Unknown notification provider '{provider}'. Choose from: {list(cls.PROVIDERS)}"
        )
