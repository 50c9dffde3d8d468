"""Notification severity styles.

Data-only registry describing how each severity looks and behaves: icon,
color role, default auto-dismiss timeout and stacking priority. The
notification center reads ``default_timeout_ms`` when a post does not carry an
explicit ttl; the toast host reads the rest.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List

__all__ = [
    "SEVERITIES",
    "NotificationStyle",
    "list_notification_styles",
    "get_notification_style",
]

SEVERITIES = ("info", "success", "warning", "error")


@dataclass(frozen=True)
class NotificationStyle:
    """Semantic style for one severity.

    Attributes
    ----------
    severity: str
        One of ``SEVERITIES``.
    icon: str
        Glyph shown at the start of the toast.
    color_role: str
        Color role token; the toast host maps it to a background.
    background: str
        Fallback background color for the color role.
    default_timeout_ms: int
        Auto-dismiss delay used when a post gives no ttl.
    stacking_priority: int
        Lower values stack nearer the top.
    """

    severity: str
    icon: str
    color_role: str
    background: str
    default_timeout_ms: int
    stacking_priority: int


_REGISTRY: Dict[str, NotificationStyle] = {}


def _register(style: NotificationStyle) -> None:
    if style.severity in _REGISTRY:
        raise ValueError(f"Duplicate notification style: {style.severity}")
    _REGISTRY[style.severity] = style


_register(NotificationStyle("info", "ℹ", "alert-info", "#1976D2", 4000, 40))
_register(NotificationStyle("success", "✔", "alert-success", "#45A049", 4000, 30))
_register(NotificationStyle("warning", "⚠", "alert-warning", "#F57C00", 6000, 20))
_register(NotificationStyle("error", "✖", "alert-error", "#D32F2F", 8000, 10))


def list_notification_styles() -> List[NotificationStyle]:
    """Styles sorted by stacking priority (most urgent first)."""
    return sorted(_REGISTRY.values(), key=lambda s: (s.stacking_priority, s.severity))


def get_notification_style(severity: str) -> NotificationStyle:
    style = _REGISTRY.get(severity)
    if style is None:
        raise KeyError(f"Unknown notification severity: {severity}")
    return style
