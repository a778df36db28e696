from dataclasses import asdict

from fastapi import APIRouter, Depends

from intake.api.deps import get_orchestrator
from intake.api.schemas import (
    NotificationSettingsResponse,
    NotificationSettingsUpdate,
    TelegramStatusResponse,
)
from intake.processor.orchestrator import DocumentOrchestrator

router = APIRouter(prefix="/telegram", tags=["Notifications"])


@router.get("/status", response_model=TelegramStatusResponse)
def telegram_status(
    orchestrator: DocumentOrchestrator = Depends(get_orchestrator),
) -> TelegramStatusResponse:
    notifier_status = orchestrator.notifications.notifier.status()
    return TelegramStatusResponse(
        is_connected=notifier_status.connected,
        configured=notifier_status.configured,
        provider=notifier_status.provider,
        username=notifier_status.username,
        error=notifier_status.error,
    )


@router.get("/settings", response_model=NotificationSettingsResponse)
def get_notification_settings(
    orchestrator: DocumentOrchestrator = Depends(get_orchestrator),
) -> dict[str, bool]:
    return asdict(orchestrator.notifications.preferences)


@router.put("/settings", response_model=NotificationSettingsResponse)
def update_notification_settings(
    body: NotificationSettingsUpdate,
    orchestrator: DocumentOrchestrator = Depends(get_orchestrator),
) -> dict[str, bool]:
    changes = body.model_dump(exclude_none=True)
    preferences = orchestrator.notifications.update_preferences(**changes)
    return asdict(preferences)
