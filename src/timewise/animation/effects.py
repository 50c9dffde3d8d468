"""Per-kind visual effects.

``build_effect(element, task)`` captures the element's starting state and
returns a frame function ``frame(element, progress)`` where ``progress`` is
the raw time fraction in [0, 1]. Easing is applied inside the effect, and at
``progress >= 1`` every effect writes its exact end state.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from ..design.motion import Easing, ease_out_quart, get_easing
from .elements import AnimatableElement
from .tasks import AnimationKind, AnimationTask

__all__ = ["Frame", "NumericText", "parse_numeric", "format_numeric", "build_effect"]

Frame = Callable[[AnimatableElement, float], None]

_NUMBER_RE = re.compile(r"^(?P<prefix>[^\d\-]*)(?P<number>-?\d[\d,]*(?:\.\d+)?)(?P<suffix>\D*)$")


@dataclass(frozen=True)
class NumericText:
    prefix: str
    value: float
    decimals: int
    grouped: bool
    suffix: str


def parse_numeric(text: Any) -> Optional[NumericText]:
    """Split ``'$1,234.5h'``-style text into prefix, number and suffix.

    Returns None when the text holds no number or more than one.
    """
    m = _NUMBER_RE.match(str(text).strip())
    if m is None:
        return None
    raw = m.group("number")
    grouped = "," in raw
    digits = raw.replace(",", "")
    try:
        value = float(digits)
    except ValueError:
        return None
    decimals = len(digits.split(".", 1)[1]) if "." in digits else 0
    return NumericText(m.group("prefix"), value, decimals, grouped, m.group("suffix"))


def format_numeric(value: float, like: NumericText) -> str:
    spec = f"{',' if like.grouped else ''}.{like.decimals}f"
    return f"{like.prefix}{format(value, spec)}{like.suffix}"


def _lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def _fade(target: float) -> Callable[[AnimatableElement, AnimationTask, Easing], Frame]:
    def build(element: AnimatableElement, task: AnimationTask, ease: Easing) -> Frame:
        start = 0.0 if target == 1.0 else float(element.get_property("opacity"))
        element.set_property("opacity", start)

        def frame(el: AnimatableElement, p: float) -> None:
            el.set_property("opacity", target if p >= 1.0 else _lerp(start, target, ease(p)))

        return frame

    return build


def _slide(prop: str, sign: float, entering: bool):
    def build(element: AnimatableElement, task: AnimationTask, ease: Easing) -> Frame:
        distance = float(task.params.get("distance", 20.0)) * sign
        fade = bool(task.params.get("fade", True))
        start, end = (distance, 0.0) if entering else (0.0, distance)
        o_start = 0.0 if entering else float(element.get_property("opacity"))
        o_end = 1.0 if entering else 0.0
        element.set_property(prop, start)
        if fade:
            element.set_property("opacity", o_start)

        def frame(el: AnimatableElement, p: float) -> None:
            e = 1.0 if p >= 1.0 else ease(p)
            el.set_property(prop, end if p >= 1.0 else _lerp(start, end, e))
            if fade:
                el.set_property("opacity", o_end if p >= 1.0 else _lerp(o_start, o_end, e))

        return frame

    return build


def _scale(element: AnimatableElement, task: AnimationTask, ease: Easing) -> Frame:
    start = float(task.params.get("start", 0.8))
    element.set_property("scale", start)
    element.set_property("opacity", 0.0)

    def frame(el: AnimatableElement, p: float) -> None:
        e = 1.0 if p >= 1.0 else ease(p)
        el.set_property("scale", 1.0 if p >= 1.0 else _lerp(start, 1.0, e))
        el.set_property("opacity", 1.0 if p >= 1.0 else e)

    return frame


def _pulse(element: AnimatableElement, task: AnimationTask, ease: Easing) -> Frame:
    rest = float(element.get_property("scale"))
    peak = rest * float(task.params.get("intensity", 1.05))

    def frame(el: AnimatableElement, p: float) -> None:
        if p >= 1.0:
            el.set_property("scale", rest)
        elif p < 0.5:
            el.set_property("scale", _lerp(rest, peak, ease(p * 2.0)))
        else:
            el.set_property("scale", _lerp(peak, rest, ease((p - 0.5) * 2.0)))

    return frame


def _bounce(element: AnimatableElement, task: AnimationTask, ease: Easing) -> Frame:
    height = float(task.params.get("height", 10.0))
    hops = 3

    def frame(el: AnimatableElement, p: float) -> None:
        if p >= 1.0:
            el.set_property("translate_y", 0.0)
            return
        el.set_property("translate_y", -height * abs(math.sin(math.pi * hops * p)) * (1.0 - p))

    return frame


def _shake(element: AnimatableElement, task: AnimationTask, ease: Easing) -> Frame:
    distance = float(task.params.get("distance", 10.0))
    cycles = 4

    def frame(el: AnimatableElement, p: float) -> None:
        if p >= 1.0:
            el.set_property("translate_x", 0.0)
            return
        el.set_property("translate_x", distance * math.sin(2.0 * math.pi * cycles * p) * (1.0 - p))

    return frame


def _rotate(element: AnimatableElement, task: AnimationTask, ease: Easing) -> Frame:
    start = float(element.get_property("rotation"))
    end = start + float(task.params.get("degrees", 360.0))

    def frame(el: AnimatableElement, p: float) -> None:
        el.set_property("rotation", (end % 360.0) if p >= 1.0 else _lerp(start, end, ease(p)))

    return frame


def _numeric(element: AnimatableElement, task: AnimationTask, ease: Easing) -> Frame:
    target_text = str(task.params.get("target", ""))
    current_text = str(element.get_property("text"))
    start = parse_numeric(current_text)
    target = parse_numeric(target_text)
    if start is None or target is None:
        return _crossfade_text(element, target_text)

    def frame(el: AnimatableElement, p: float) -> None:
        if p >= 1.0:
            el.set_property("text", target_text)
        elif p <= 0.0:
            el.set_property("text", current_text)
        else:
            el.set_property("text", format_numeric(_lerp(start.value, target.value, ease_out_quart(p)), target))

    return frame


def _crossfade_text(element: AnimatableElement, target_text: str) -> Frame:
    """Fade out, swap the text at the midpoint, fade back in."""
    swapped = [False]

    def frame(el: AnimatableElement, p: float) -> None:
        if p >= 0.5 and not swapped[0]:
            el.set_property("text", target_text)
            swapped[0] = True
        if p >= 1.0:
            el.set_property("opacity", 1.0)
        elif p < 0.5:
            el.set_property("opacity", 1.0 - 2.0 * p)
        else:
            el.set_property("opacity", 2.0 * p - 1.0)

    return frame


def _dimension(element: AnimatableElement, task: AnimationTask, ease: Easing) -> Frame:
    target = float(task.params.get("target", 100.0))
    start_param = task.params.get("start", 0.0)
    start = float(element.get_property("width_pct")) if start_param is None else float(start_param)
    element.set_property("width_pct", start)

    def frame(el: AnimatableElement, p: float) -> None:
        el.set_property("width_pct", target if p >= 1.0 else _lerp(start, target, ease(p)))

    return frame


_BUILDERS: Dict[AnimationKind, Callable[[AnimatableElement, AnimationTask, Easing], Frame]] = {
    AnimationKind.FADE_IN: _fade(1.0),
    AnimationKind.FADE_OUT: _fade(0.0),
    AnimationKind.SLIDE_UP: _slide("translate_y", 1.0, entering=True),
    AnimationKind.SLIDE_DOWN: _slide("translate_y", -1.0, entering=True),
    AnimationKind.SLIDE_LEFT: _slide("translate_x", 1.0, entering=True),
    AnimationKind.SLIDE_RIGHT: _slide("translate_x", 1.0, entering=False),
    AnimationKind.SCALE: _scale,
    AnimationKind.PULSE: _pulse,
    AnimationKind.BOUNCE: _bounce,
    AnimationKind.SHAKE: _shake,
    AnimationKind.ROTATE: _rotate,
    AnimationKind.NUMERIC: _numeric,
    AnimationKind.DIMENSION: _dimension,
}


def build_effect(element: AnimatableElement, task: AnimationTask) -> Frame:
    """Capture the start state of ``element`` and return its frame function."""
    return _BUILDERS[task.kind](element, task, get_easing(task.easing))
