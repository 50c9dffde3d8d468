"""Chart option defaults and merge rules.

Options are plain nested dicts. ``merge_options`` is the single merge rule
used both for layering caller options over the structural defaults and for
``ChartRegistry.update_options``:

 - top-level keys overwrite wholesale,
 - ``plugins`` and ``scales`` merge key-by-key (recursively), so overriding
   ``scales.y`` leaves ``scales.x`` alone.
"""

from __future__ import annotations

import copy
from typing import Any, Dict, Mapping

from .types import ChartKind

__all__ = ["MERGED_SECTIONS", "default_options", "merge_options", "deep_merge"]

MERGED_SECTIONS = ("plugins", "scales")

_TEXT = "#ffffff"
_GRID = "rgba(255, 255, 255, 0.1)"
_BORDER = "rgba(255, 255, 255, 0.2)"
_FONT = "Inter, sans-serif"


def _axis() -> Dict[str, Any]:
    return {
        "ticks": {"color": _TEXT, "font": {"family": _FONT}},
        "grid": {"color": _GRID, "borderColor": _BORDER},
    }


def _tooltip() -> Dict[str, Any]:
    return {
        "backgroundColor": "rgba(0, 0, 0, 0.8)",
        "titleColor": _TEXT,
        "bodyColor": _TEXT,
        "borderColor": _BORDER,
        "borderWidth": 1,
        "cornerRadius": 8,
    }


def default_options(kind: ChartKind) -> Dict[str, Any]:
    """Structural defaults per chart kind (fresh dict on every call)."""
    opts: Dict[str, Any] = {
        "responsive": True,
        "maintainAspectRatio": False,
        "animation": {"duration": 1000, "easing": "easeOutQuart"},
        "plugins": {
            "legend": {"display": True, "labels": {"color": _TEXT, "font": {"family": _FONT}}},
            "tooltip": _tooltip(),
        },
    }
    if kind.slice_based:
        opts["animation"].update({"animateRotate": True, "animateScale": True})
        opts["plugins"]["legend"].update({"position": "right"})
        opts["plugins"]["legend"]["labels"].update({"boxWidth": 15, "padding": 20})
        opts["cutout"] = "50%" if kind is ChartKind.DOUGHNUT else 0
    else:
        opts["scales"] = {"x": _axis(), "y": _axis()}
    if kind is ChartKind.LINE:
        opts["interaction"] = {"intersect": False, "mode": "index"}
    return opts


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    """Recursive dict merge; ``override`` wins on non-dict leaves."""
    out: Dict[str, Any] = copy.deepcopy(dict(base))
    for key, value in override.items():
        current = out.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            out[key] = deep_merge(current, value)
        else:
            out[key] = copy.deepcopy(value)
    return out


def merge_options(base: Mapping[str, Any], override: Mapping[str, Any] | None) -> Dict[str, Any]:
    merged: Dict[str, Any] = copy.deepcopy(dict(base))
    for key, value in (override or {}).items():
        current = merged.get(key)
        if key in MERGED_SECTIONS and isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged
