"""Matplotlib render backend.

Surfaces are host-owned ``Figure`` objects registered by id. The backend
draws onto the figure it is handed and never creates or closes figures of
its own; embedding into Qt is the host's business (``FigureCanvasQTAgg``).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Sequence

import numpy as np
from matplotlib.figure import Figure

from .types import ChartKind, Series

__all__ = ["MatplotlibChartBackend", "MatplotlibHandle"]

log = logging.getLogger(__name__)

_RING_WIDTH = 0.4


@dataclass
class MatplotlibHandle:
    surface_id: str
    figure: Figure
    kind: ChartKind | None = None
    options: Dict[str, Any] = field(default_factory=dict)
    artists: List[Any] = field(default_factory=list)
    draws: int = 0
    mutations: int = 0


def _legend_kwargs(options: Mapping[str, Any]) -> Dict[str, Any] | None:
    legend = (options.get("plugins") or {}).get("legend") or {}
    if not legend.get("display", True):
        return None
    position = legend.get("position", "top")
    loc = {
        "right": "center left",
        "left": "center right",
        "bottom": "upper center",
        "top": "lower center",
    }.get(position, "best")
    anchor = {
        "right": (1.0, 0.5),
        "left": (0.0, 0.5),
        "bottom": (0.5, -0.05),
        "top": (0.5, 1.0),
    }.get(position)
    kwargs: Dict[str, Any] = {"loc": loc, "frameon": False, "fontsize": 8}
    if anchor is not None:
        kwargs["bbox_to_anchor"] = anchor
    return kwargs


def _wedge_angles(values: Sequence[float]) -> List[tuple[float, float]]:
    """Clockwise from 12 o'clock, matching ``pie(startangle=90, counterclock=False)``."""
    total = float(sum(values)) or 1.0
    angles = []
    start = 90.0
    for v in values:
        sweep = 360.0 * float(v) / total
        angles.append((start - sweep, start))
        start -= sweep
    return angles


class MatplotlibChartBackend:
    def __init__(self) -> None:
        self._surfaces: Dict[str, Figure] = {}

    # ---------------- Surface table -----------------------------------
    def register_surface(self, surface_id: str, figure: Figure) -> None:
        self._surfaces[surface_id] = figure

    def unregister_surface(self, surface_id: str) -> Figure | None:
        return self._surfaces.pop(surface_id, None)

    def has_surface(self, surface_id: str) -> bool:
        return surface_id in self._surfaces

    # ---------------- RenderBackend -----------------------------------
    def attach(self, surface_id: str) -> MatplotlibHandle | None:
        figure = self._surfaces.get(surface_id)
        if figure is None:
            return None
        return MatplotlibHandle(surface_id=surface_id, figure=figure)

    def draw(
        self,
        handle: MatplotlibHandle,
        kind: ChartKind,
        series: Sequence[Series],
        labels: Sequence[str],
        options: Mapping[str, Any],
    ) -> None:
        fig = handle.figure
        fig.clear()
        ax = fig.add_subplot(111)
        handle.kind = kind
        handle.options = dict(options)
        if kind.slice_based:
            handle.artists = self._draw_slices(ax, kind, series, options)
        elif kind is ChartKind.BAR:
            handle.artists = self._draw_bars(ax, series, labels)
        else:
            handle.artists = self._draw_lines(ax, series, labels)
        title = ((options.get("plugins") or {}).get("title") or {}).get("text")
        if title:
            ax.set_title(title)
        legend = _legend_kwargs(options)
        if legend is not None and series:
            ax.legend(**legend)
        handle.draws += 1
        self._flush(fig)

    def _draw_slices(self, ax, kind: ChartKind, series: Sequence[Series], options: Mapping[str, Any]):
        values = [s.values[0] for s in series]
        wedgeprops: Dict[str, Any] = {"edgecolor": "white", "linewidth": 1}
        cutout = options.get("cutout", "50%" if kind is ChartKind.DOUGHNUT else 0)
        if kind is ChartKind.DOUGHNUT and cutout:
            wedgeprops["width"] = _RING_WIDTH
        wedges, _texts = ax.pie(
            values,
            labels=None,
            colors=[s.color for s in series],
            startangle=90,
            counterclock=False,
            wedgeprops=wedgeprops,
        )
        for wedge, s in zip(wedges, series):
            wedge.set_label(s.label)
        ax.set_aspect("equal")
        return list(wedges)

    def _draw_bars(self, ax, series: Sequence[Series], labels: Sequence[str]):
        x = np.arange(len(labels))
        width = 0.8 / max(1, len(series))
        containers = []
        for i, s in enumerate(series):
            offset = (i - (len(series) - 1) / 2.0) * width
            containers.append(
                ax.bar(x + offset, np.asarray(s.values, dtype=float), width, label=s.label, color=s.color)
            )
        ax.set_xticks(x)
        ax.set_xticklabels(list(labels))
        return containers

    def _draw_lines(self, ax, series: Sequence[Series], labels: Sequence[str]):
        x = np.arange(len(labels))
        lines = []
        for s in series:
            (line,) = ax.plot(x, np.asarray(s.values, dtype=float), label=s.label, color=s.color)
            lines.append(line)
        ax.set_xticks(x)
        ax.set_xticklabels(list(labels))
        return lines

    def mutate(self, handle: MatplotlibHandle, series: Sequence[Series], labels: Sequence[str]) -> None:
        """Update artists in place; fall back to a redraw on the same figure
        when the structure (slice or series count) changed."""
        kind = handle.kind
        if kind is None or len(handle.artists) != len(series):
            self._redraw(handle, series, labels)
            return
        if kind.slice_based:
            for wedge, (theta1, theta2), s in zip(
                handle.artists, _wedge_angles([s.values[0] for s in series]), series
            ):
                wedge.set_theta1(theta1)
                wedge.set_theta2(theta2)
                wedge.set_facecolor(s.color)
                wedge.set_label(s.label)
        elif kind is ChartKind.BAR:
            if any(len(c.patches) != len(s.values) for c, s in zip(handle.artists, series)):
                self._redraw(handle, series, labels)
                return
            for container, s in zip(handle.artists, series):
                for rect, v in zip(container.patches, s.values):
                    rect.set_height(float(v))
                    rect.set_facecolor(s.color)
            ax = handle.figure.axes[0]
            ax.set_xticklabels(list(labels))
            ax.relim()
            ax.autoscale_view()
        else:
            for line, s in zip(handle.artists, series):
                if len(line.get_xdata()) != len(s.values):
                    self._redraw(handle, series, labels)
                    return
                line.set_ydata(np.asarray(s.values, dtype=float))
                line.set_color(s.color)
            ax = handle.figure.axes[0]
            ax.set_xticklabels(list(labels))
            ax.relim()
            ax.autoscale_view()
        handle.mutations += 1
        self._flush(handle.figure)

    def _redraw(self, handle: MatplotlibHandle, series: Sequence[Series], labels: Sequence[str]) -> None:
        kind = handle.kind or ChartKind.BAR
        self.draw(handle, kind, series, labels, handle.options)
        handle.mutations += 1

    def dispose(self, handle: MatplotlibHandle) -> None:
        handle.figure.clear()
        handle.artists = []
        self._flush(handle.figure)

    def relayout(self, handle: MatplotlibHandle) -> None:
        try:
            handle.figure.tight_layout()
        except ValueError:
            log.debug("tight_layout skipped for '%s'", handle.surface_id)
        self._flush(handle.figure)

    @staticmethod
    def _flush(fig: Figure) -> None:
        canvas = fig.canvas
        if canvas is not None:
            canvas.draw_idle()
