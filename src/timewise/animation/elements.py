"""Animatable elements and element resolution.

The sequencer never touches widgets directly. It resolves an element id to an
``AnimatableElement`` at task start and again on every frame; a missing or
detached element abandons the running task.

Supported properties:

 - ``opacity``       0..1
 - ``translate_x``   px offset from the resting position
 - ``translate_y``   px offset from the resting position
 - ``scale``         1.0 = natural size
 - ``rotation``      degrees
 - ``text``          displayed text
 - ``width_pct``     width as a percentage of the parent
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Protocol

from PyQt6 import sip
from PyQt6.QtCore import QPoint
from PyQt6.QtWidgets import QGraphicsOpacityEffect, QWidget

__all__ = [
    "PROPERTIES",
    "AnimatableElement",
    "ElementResolver",
    "QtWidgetElement",
    "WidgetRegistry",
    "neutral_value",
]

log = logging.getLogger(__name__)

PROPERTIES = ("opacity", "translate_x", "translate_y", "scale", "rotation", "text", "width_pct")

_NEUTRAL: Dict[str, Any] = {
    "opacity": 1.0,
    "translate_x": 0.0,
    "translate_y": 0.0,
    "scale": 1.0,
    "rotation": 0.0,
    "text": "",
    "width_pct": 100.0,
}


class AnimatableElement(Protocol):  # pragma: no cover - structural only
    def is_attached(self) -> bool: ...

    def get_property(self, name: str) -> Any: ...

    def set_property(self, name: str, value: Any) -> None: ...


class ElementResolver(Protocol):  # pragma: no cover - structural only
    def resolve(self, element_id: str) -> Optional[AnimatableElement]: ...


def neutral_value(name: str) -> Any:
    if name not in _NEUTRAL:
        raise KeyError(f"Unknown animatable property: {name}")
    return _NEUTRAL[name]


class QtWidgetElement:
    """Adapts a ``QWidget`` to the animatable property set.

    Opacity goes through a ``QGraphicsOpacityEffect`` installed on first use.
    Translation moves the widget relative to its resting position. The rest
    point is re-read from the widget whenever something other than this
    adapter (usually the parent layout) has moved it since the last
    translation write, so widgets placed after registration land where their
    layout put them. Scale and rotation have no native QWidget
    equivalent; they are kept as dynamic properties (``animScale``,
    ``animRotation``) for custom painting or style sheets to pick up.
    """

    def __init__(self, widget: QWidget) -> None:
        self._widget = widget
        self._rest = QPoint(widget.pos())
        self._placed: QPoint | None = None
        self._offset = [0.0, 0.0]
        self._effect: QGraphicsOpacityEffect | None = None

    @property
    def widget(self) -> QWidget:
        return self._widget

    def is_attached(self) -> bool:
        return not sip.isdeleted(self._widget)

    def _sync_rest(self) -> None:
        pos = self._widget.pos()
        if self._placed is None or pos != self._placed:
            self._rest = QPoint(pos)

    def _opacity_effect(self) -> QGraphicsOpacityEffect:
        if self._effect is None or sip.isdeleted(self._effect):
            effect = self._widget.graphicsEffect()
            if not isinstance(effect, QGraphicsOpacityEffect):
                effect = QGraphicsOpacityEffect(self._widget)
                effect.setOpacity(1.0)
                self._widget.setGraphicsEffect(effect)
            self._effect = effect
        return self._effect

    def get_property(self, name: str) -> Any:
        w = self._widget
        if name == "opacity":
            effect = w.graphicsEffect()
            return effect.opacity() if isinstance(effect, QGraphicsOpacityEffect) else 1.0
        if name == "translate_x":
            return self._offset[0]
        if name == "translate_y":
            return self._offset[1]
        if name == "scale":
            value = w.property("animScale")
            return 1.0 if value is None else float(value)
        if name == "rotation":
            value = w.property("animRotation")
            return 0.0 if value is None else float(value)
        if name == "text":
            text = getattr(w, "text", None)
            return text() if callable(text) else ""
        if name == "width_pct":
            parent = w.parentWidget()
            if parent is None or parent.width() <= 0:
                return 100.0
            return 100.0 * w.width() / parent.width()
        raise KeyError(f"Unknown animatable property: {name}")

    def set_property(self, name: str, value: Any) -> None:
        w = self._widget
        if name == "opacity":
            self._opacity_effect().setOpacity(max(0.0, min(1.0, float(value))))
        elif name in ("translate_x", "translate_y"):
            self._sync_rest()
            self._offset[0 if name == "translate_x" else 1] = float(value)
            target = QPoint(self._rest.x() + round(self._offset[0]), self._rest.y() + round(self._offset[1]))
            w.move(target)
            self._placed = target
        elif name == "scale":
            w.setProperty("animScale", float(value))
            w.update()
        elif name == "rotation":
            w.setProperty("animRotation", float(value))
            w.update()
        elif name == "text":
            setter = getattr(w, "setText", None)
            if setter is None:
                raise TypeError(f"{type(w).__name__} has no text to animate")
            setter(str(value))
        elif name == "width_pct":
            parent = w.parentWidget()
            base = parent.width() if parent is not None else w.width()
            w.setFixedWidth(max(0, round(base * float(value) / 100.0)))
        else:
            raise KeyError(f"Unknown animatable property: {name}")


class WidgetRegistry:
    """Maps element ids to widgets; destroyed widgets are forgotten."""

    def __init__(self) -> None:
        self._elements: Dict[str, QtWidgetElement] = {}

    def register(self, element_id: str, widget: QWidget) -> QtWidgetElement:
        element = QtWidgetElement(widget)
        self._elements[element_id] = element
        widget.destroyed.connect(lambda *_a, eid=element_id, el=element: self._forget(eid, el))
        return element

    def unregister(self, element_id: str) -> bool:
        return self._elements.pop(element_id, None) is not None

    def _forget(self, element_id: str, element: QtWidgetElement) -> None:
        if self._elements.get(element_id) is element:
            del self._elements[element_id]
            log.debug("Element '%s' destroyed; unregistered", element_id)

    def resolve(self, element_id: str) -> QtWidgetElement | None:
        element = self._elements.get(element_id)
        if element is not None and not element.is_attached():
            del self._elements[element_id]
            return None
        return element

    def __contains__(self, element_id: object) -> bool:
        return element_id in self._elements

    def __len__(self) -> int:
        return len(self._elements)
