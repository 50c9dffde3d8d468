"""Toast presentation layer.

``ToastHost`` stacks notification toasts in a vertical column and implements
the notification presenter protocol (``show`` / ``remove``). Timing,
capacity and dismissal belong to ``NotificationCenter``; the host only
builds widgets and forwards user input back to the center:

 - close button -> ``center.dismiss``
 - action buttons -> ``center.invoke_action``
 - hover enter/leave -> ``center.pause_expiry`` / ``center.resume_expiry``

When a ``WidgetRegistry`` is supplied each toast is registered under the
notification's element id so the sequencer can run enter/exit transitions
on it.

Usage:
    host = ToastHost(window, widgets=widget_registry)
    center.set_presenter(host)
    host.bind(center)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, List, Optional

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import QHBoxLayout, QLabel, QPushButton, QVBoxLayout, QWidget

from ..animation.elements import WidgetRegistry
from ..design.notifications import get_notification_style

if TYPE_CHECKING:  # pragma: no cover
    from ..services.notification_center import Notification, NotificationCenter

__all__ = ["ToastHost", "ToastItem"]


class ToastItem(QWidget):
    """Toast widget that reports hover state to its host."""

    def __init__(self, host: "ToastHost", notification_id: int, severity: str, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self._host = host
        self.notification_id = notification_id
        self.severity = severity

    def enterEvent(self, event):  # type: ignore[override]
        self._host._on_hover(self.notification_id, True)
        return super().enterEvent(event)

    def leaveEvent(self, event):  # type: ignore[override]
        self._host._on_hover(self.notification_id, False)
        return super().leaveEvent(event)


class ToastHost(QWidget):
    """Container stacking toasts by severity priority (errors first).

    A stretch at the end of the layout keeps toasts packed at the top.
    """

    def __init__(self, parent: Optional[QWidget] = None, *, widgets: WidgetRegistry | None = None):
        super().__init__(parent)
        self.setObjectName("toastHost")
        self.setAttribute(Qt.WidgetAttribute.WA_StyledBackground, True)
        self._widgets = widgets
        self._center: "NotificationCenter | None" = None
        self._toasts: Dict[int, ToastItem] = {}
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(8)
        layout.addStretch(1)

    def bind(self, center: "NotificationCenter") -> None:
        self._center = center

    # Presenter protocol ----------------------------------------------
    def show(self, notification: "Notification | None" = None) -> None:  # type: ignore[override]
        """Present ``notification``; with no argument behaves like ``QWidget.show``."""
        if notification is None:
            super().show()
            return
        toast = self._build_toast(notification)
        self.layout().insertWidget(self._insert_index(notification.severity), toast)
        self._toasts[notification.id] = toast
        if self._widgets is not None:
            self._widgets.register(notification.element_id, toast)
        if not self.isVisible() and self.parentWidget() is not None:
            super().show()

    def remove(self, notification_id: int) -> None:
        toast = self._toasts.pop(notification_id, None)
        if toast is None:
            return
        if self._widgets is not None:
            self._widgets.unregister(f"notification-{notification_id}")
        self.layout().removeWidget(toast)
        toast.setParent(None)
        toast.deleteLater()

    # Introspection ---------------------------------------------------
    def toast_ids(self) -> List[int]:
        """Notification ids in visual (top to bottom) order."""
        out: List[int] = []
        layout = self.layout()
        for i in range(layout.count() - 1):
            item = layout.itemAt(i)
            widget = item.widget() if item else None
            if isinstance(widget, ToastItem):
                out.append(widget.notification_id)
        return out

    def toast(self, notification_id: int) -> ToastItem | None:
        return self._toasts.get(notification_id)

    # Internals -------------------------------------------------------
    def _insert_index(self, severity: str) -> int:
        priority = get_notification_style(severity).stacking_priority
        index = 0
        for toast in self._toasts.values():
            if get_notification_style(toast.severity).stacking_priority <= priority:
                index += 1
        return min(index, self.layout().count() - 1)

    def _build_toast(self, notification: "Notification") -> ToastItem:
        style = get_notification_style(notification.severity)
        w = ToastItem(self, notification.id, notification.severity, self)
        w.setObjectName("toastWidget")
        w.setAttribute(Qt.WidgetAttribute.WA_StyledBackground, True)
        w.setProperty("severity", style.severity)
        w.setProperty("colorRole", style.color_role)
        w.setStyleSheet(f"#toastWidget {{ background: {style.background}; border-radius: 8px; }}")
        hl = QHBoxLayout(w)
        hl.setContentsMargins(12, 8, 12, 8)
        hl.setSpacing(8)
        icon = QLabel(style.icon)
        icon.setObjectName("toastIcon")
        hl.addWidget(icon, alignment=Qt.AlignmentFlag.AlignTop)
        label = QLabel(notification.message)
        label.setObjectName("toastMessage")
        label.setWordWrap(True)
        hl.addWidget(label, 1)
        for index, action in enumerate(notification.actions):
            btn = QPushButton(action.label)
            btn.setObjectName("toastActionButton")
            btn.clicked.connect(lambda _=False, nid=notification.id, i=index: self._on_action(nid, i))  # type: ignore
            hl.addWidget(btn)
        close_btn = QPushButton("✕")
        close_btn.setObjectName("toastCloseButton")
        close_btn.setCursor(Qt.CursorShape.PointingHandCursor)
        close_btn.setFixedSize(20, 20)
        close_btn.clicked.connect(lambda _=False, nid=notification.id: self._on_close(nid))  # type: ignore
        hl.addWidget(close_btn, alignment=Qt.AlignmentFlag.AlignTop)
        return w

    def _on_close(self, notification_id: int) -> None:
        if self._center is not None:
            self._center.dismiss(notification_id)
        else:
            self.remove(notification_id)

    def _on_action(self, notification_id: int, index: int) -> None:
        if self._center is not None:
            self._center.invoke_action(notification_id, index)

    def _on_hover(self, notification_id: int, entered: bool) -> None:
        if self._center is None:
            return
        if entered:
            self._center.pause_expiry(notification_id)
        else:
            self._center.resume_expiry(notification_id)
