"""Core charting types."""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence, Tuple, Union

__all__ = [
    "ChartKind",
    "Series",
    "ChartData",
    "SeriesPatch",
    "ChartResource",
    "RenderBackend",
    "SeriesInput",
]


class ChartKind(str, Enum):
    DOUGHNUT = "doughnut"
    BAR = "bar"
    LINE = "line"
    PIE = "pie"

    @property
    def slice_based(self) -> bool:
        """Doughnut and pie charts: one value per series, each series a slice."""
        return self in (ChartKind.DOUGHNUT, ChartKind.PIE)


@dataclass(frozen=True)
class Series:
    """One named series.

    For slice-based kinds ``values`` holds exactly one number (the slice);
    for bar/line charts it is aligned with the chart's category labels.
    ``color`` is optional; the registry fills gaps from the palette.
    """

    label: str
    values: Tuple[float, ...]
    color: Optional[str] = None

    @classmethod
    def slice(cls, label: str, value: float, color: Optional[str] = None) -> "Series":
        return cls(label=label, values=(value,), color=color)

    @classmethod
    def coerce(cls, item: Union["Series", Mapping[str, Any]]) -> "Series":
        """Accept a ``Series`` or a ``{label, value | values, color?}`` mapping."""
        if isinstance(item, Series):
            return item
        if not isinstance(item, Mapping):
            raise TypeError(f"Cannot build a series from {type(item).__name__}")
        if "values" in item:
            raw = item["values"]
            values = tuple(raw) if isinstance(raw, (list, tuple)) else (raw,)
        else:
            values = (item.get("value"),)
        return cls(label=item.get("label"), values=values, color=item.get("color"))  # type: ignore[arg-type]

    def with_color(self, color: str) -> "Series":
        return replace(self, color=color)

    @property
    def total(self) -> float:
        return math.fsum(self.values)


@dataclass(frozen=True)
class ChartData:
    """Labels plus series, the payload shape data providers hand over."""

    labels: Tuple[str, ...] = ()
    series: Tuple[Series, ...] = ()

    @classmethod
    def from_flat(
        cls,
        labels: Sequence[str],
        data: Sequence[float],
        colors: Sequence[str] = (),
    ) -> "ChartData":
        """Build slice series from parallel ``labels``/``data``/``colors`` lists."""
        series = tuple(
            Series.slice(label, value, colors[i] if i < len(colors) else None)
            for i, (label, value) in enumerate(zip(labels, data))
        )
        return cls(labels=tuple(labels), series=series)


SeriesInput = Union[ChartData, Sequence[Union[Series, Mapping[str, Any]]]]


@dataclass(frozen=True)
class SeriesPatch:
    """In-place update for a live chart.

    ``values`` carries one sequence per series. ``labels`` are category
    labels for bar/line charts and slice labels for doughnut/pie charts.
    """

    labels: Optional[Tuple[str, ...]] = None
    values: Optional[Tuple[Tuple[float, ...], ...]] = None
    colors: Optional[Tuple[str, ...]] = None

    @classmethod
    def slices(
        cls,
        *,
        labels: Optional[Sequence[str]] = None,
        values: Optional[Sequence[float]] = None,
        colors: Optional[Sequence[str]] = None,
    ) -> "SeriesPatch":
        """Patch for doughnut/pie charts from flat per-slice lists."""
        return cls(
            labels=tuple(labels) if labels is not None else None,
            values=tuple((v,) for v in values) if values is not None else None,
            colors=tuple(colors) if colors is not None else None,
        )

    @property
    def is_empty(self) -> bool:
        return self.labels is None and self.values is None and self.colors is None


@dataclass
class ChartResource:
    """The live chart bound to one surface. Mutated only by the registry."""

    surface_id: str
    kind: ChartKind
    series: List[Series]
    labels: List[str]
    options: Dict[str, Any]
    handle: Any
    created_at: float
    revision: int = 0

    @property
    def colors(self) -> List[Optional[str]]:
        return [s.color for s in self.series]


class RenderBackend(Protocol):  # pragma: no cover - structural only
    """What the registry needs from a drawing backend."""

    def attach(self, surface_id: str) -> Any | None: ...

    def draw(
        self,
        handle: Any,
        kind: ChartKind,
        series: Sequence[Series],
        labels: Sequence[str],
        options: Mapping[str, Any],
    ) -> None: ...

    def mutate(self, handle: Any, series: Sequence[Series], labels: Sequence[str]) -> None: ...

    def dispose(self, handle: Any) -> None: ...

    def relayout(self, handle: Any) -> None: ...
