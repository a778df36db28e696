from datetime import datetime

from intake.notification.models import NotificationEvent, NotificationType

_TEMPLATES: dict[NotificationType, str] = {
    NotificationType.UPLOAD: '\U0001f4c4 New document uploaded: "{name}"',
    NotificationType.OCR_COMPLETE: '\U0001f50d OCR processing completed for "{name}"',
    NotificationType.ANALYSIS_COMPLETE: '\U0001f916 AI analysis completed for "{name}"',
}


def format_message(event: NotificationEvent, sent_at: datetime) -> str:
    """Render the chat message for an event, ending with a timestamp line."""
    template = _TEMPLATES.get(event.type)
    if template is None:
        body = f"❌ Error: {event.message or 'An error occurred'}"
    else:
        body = template.format(name=event.document_name or "")
    return f"{body}\n\n⏰ {sent_at.strftime('%Y-%m-%d %H:%M:%S')}"
