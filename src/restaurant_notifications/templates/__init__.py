"""Message templates for restaurant notification types."""

from restaurant_notifications.templates.message_templates import (
    NOTIFICATION_TYPES,
    MessageTemplateRenderer,
    format_idr,
    render_test_message,
)

__all__ = [
    "NOTIFICATION_TYPES",
    "MessageTemplateRenderer",
    "format_idr",
    "render_test_message",
]
