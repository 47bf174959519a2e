"""Notification package."""

from .broadcast import (
    BroadcastChannel,
    BroadcastMessage,
    Subscription,
    TIMER_TOPIC,
)
from .bridge import (
    NotificationBridge,
    NotificationAction,
    NotificationRenderer,
    RenderRequest,
    build_render_request,
    format_display,
    NOTIFICATION_ID,
    NOTIFICATION_TITLE,
)

__all__ = [
    "BroadcastChannel",
    "BroadcastMessage",
    "Subscription",
    "TIMER_TOPIC",
    "NotificationBridge",
    "NotificationAction",
    "NotificationRenderer",
    "RenderRequest",
    "build_render_request",
    "format_display",
    "NOTIFICATION_ID",
    "NOTIFICATION_TITLE",
]
