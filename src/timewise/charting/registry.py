"""Chart registry: one live chart resource per surface id.

The registry owns every ``ChartResource``. Creating a chart for a surface
that already carries one releases the old resource first, so a surface
never ends up with two charts drawing on it.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Sequence

from ..errors import MalformedSeriesError
from ..services.event_bus import DashboardEvent, EventBus
from .options import default_options, merge_options
from .palette import PALETTE, assign_colors, color_for_index
from .types import ChartData, ChartKind, ChartResource, RenderBackend, Series, SeriesInput, SeriesPatch
from .validation import ensure_valid_patch, ensure_valid_series, parse_kind

__all__ = ["ChartRegistry"]

log = logging.getLogger(__name__)


def _normalize(series: SeriesInput, labels: Optional[Sequence[str]]):
    if isinstance(series, ChartData):
        return list(series.series), (list(labels) if labels is not None else list(series.labels))
    try:
        items = [Series.coerce(item) for item in series]
    except TypeError as e:
        raise MalformedSeriesError([str(e)]) from None
    return items, (list(labels) if labels is not None else None)


class ChartRegistry:
    def __init__(
        self,
        backend: RenderBackend,
        *,
        event_bus: EventBus | None = None,
        palette: Sequence[str] = PALETTE,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._backend = backend
        self._bus = event_bus
        self._palette = tuple(palette)
        self._clock = clock
        self._resources: Dict[str, ChartResource] = {}

    # ---------------- Lookup ------------------------------------------
    def get(self, surface_id: str) -> ChartResource | None:
        return self._resources.get(surface_id)

    def surface_ids(self) -> List[str]:
        return list(self._resources)

    def __len__(self) -> int:
        return len(self._resources)

    def __contains__(self, surface_id: object) -> bool:
        return surface_id in self._resources

    def __iter__(self) -> Iterator[ChartResource]:
        return iter(list(self._resources.values()))

    # ---------------- Lifecycle ---------------------------------------
    def create(
        self,
        surface_id: str,
        kind: ChartKind | str,
        series: SeriesInput,
        options: Mapping[str, Any] | None = None,
        *,
        labels: Optional[Sequence[str]] = None,
    ) -> ChartResource | None:
        """Create (or replace) the chart bound to ``surface_id``.

        Validation happens before the surface is touched: a
        ``MalformedSeriesError`` leaves any existing chart in place. An
        unresolvable surface is a logged no-op returning ``None``.
        """
        try:
            chart_kind = parse_kind(kind)
        except MalformedSeriesError as e:
            raise MalformedSeriesError(e.issues, surface_id=surface_id) from None
        items, category_labels = _normalize(series, labels)
        ensure_valid_series(chart_kind, items, category_labels, surface_id=surface_id)
        if chart_kind.slice_based:
            category_labels = [s.label for s in items]
        elif category_labels is None:
            category_labels = [str(i + 1) for i in range(len(items[0].values))]
        merged = merge_options(default_options(chart_kind), options)

        handle = self._backend.attach(surface_id)
        if handle is None:
            log.warning("Chart surface '%s' did not resolve; create skipped", surface_id)
            self._publish(
                DashboardEvent.SURFACE_UNRESOLVED, {"surface_id": surface_id, "kind": chart_kind.value}
            )
            return None

        replaced = self.destroy(surface_id)
        colored = assign_colors(items, self._palette)
        self._backend.draw(handle, chart_kind, colored, category_labels, merged)
        resource = ChartResource(
            surface_id=surface_id,
            kind=chart_kind,
            series=colored,
            labels=category_labels,
            options=merged,
            handle=handle,
            created_at=self._clock(),
        )
        self._resources[surface_id] = resource
        log.debug(
            "Chart created surface=%s kind=%s series=%d replaced=%s",
            surface_id,
            chart_kind.value,
            len(colored),
            replaced,
        )
        self._publish(
            DashboardEvent.CHART_CREATED,
            {"surface_id": surface_id, "kind": chart_kind.value, "replaced": replaced},
        )
        return resource

    def update(self, surface_id: str, patch: SeriesPatch) -> ChartResource | None:
        """Mutate the live chart in place; no-op (``None``) when absent."""
        resource = self._resources.get(surface_id)
        if resource is None:
            log.debug("Chart update ignored; no chart at '%s'", surface_id)
            return None
        if patch.is_empty:
            return resource
        ensure_valid_patch(
            resource.kind, resource.series, resource.labels, patch, surface_id=surface_id
        )
        series, labels = self._apply_patch(resource, patch)
        resource.series = series
        resource.labels = labels
        resource.revision += 1
        self._backend.mutate(resource.handle, series, labels)
        return resource

    def _apply_patch(self, resource: ChartResource, patch: SeriesPatch):
        current = resource.series
        if resource.kind.slice_based:
            count = len(patch.labels) if patch.labels is not None else len(current)
            if patch.values is not None:
                count = len(patch.values)
            series: List[Series] = []
            for i in range(count):
                old = current[i] if i < len(current) else None
                label = patch.labels[i] if patch.labels is not None else old.label  # type: ignore[union-attr]
                values = tuple(patch.values[i]) if patch.values is not None else old.values  # type: ignore[union-attr]
                color = old.color if old is not None else color_for_index(i, self._palette)
                series.append(Series(label=label, values=values, color=color))
            labels = [s.label for s in series]
        else:
            series = [
                Series(
                    label=s.label,
                    values=tuple(patch.values[i]) if patch.values is not None else s.values,
                    color=s.color,
                )
                for i, s in enumerate(current)
            ]
            labels = list(patch.labels) if patch.labels is not None else list(resource.labels)
        if patch.colors is not None:
            series = [
                s.with_color(patch.colors[i]) if i < len(patch.colors) else s
                for i, s in enumerate(series)
            ]
        return series, labels

    def update_options(
        self, surface_id: str, partial_options: Mapping[str, Any]
    ) -> ChartResource | None:
        resource = self._resources.get(surface_id)
        if resource is None:
            return None
        resource.options = merge_options(resource.options, partial_options)
        resource.revision += 1
        self._backend.draw(
            resource.handle, resource.kind, resource.series, resource.labels, resource.options
        )
        return resource

    def destroy(self, surface_id: str) -> bool:
        """Release the chart at ``surface_id``. Returns False when there was none."""
        resource = self._resources.pop(surface_id, None)
        if resource is None:
            return False
        try:
            self._backend.dispose(resource.handle)
        finally:
            self._publish(
                DashboardEvent.CHART_DESTROYED,
                {"surface_id": surface_id, "kind": resource.kind.value},
            )
        return True

    def destroy_all(self) -> int:
        released = 0
        for surface_id in list(self._resources):
            try:
                if self.destroy(surface_id):
                    released += 1
            except Exception:  # noqa: BLE001 - one failing dispose must not strand the rest
                log.exception("Disposing chart at '%s' failed", surface_id)
                released += 1
        if released:
            log.debug("Released %d chart(s)", released)
        return released

    def resize_all(self) -> int:
        count = 0
        for resource in list(self._resources.values()):
            try:
                self._backend.relayout(resource.handle)
                count += 1
            except Exception:  # noqa: BLE001
                log.exception("Relayout of chart '%s' failed", resource.surface_id)
        return count

    def _publish(self, event: DashboardEvent, payload: Dict[str, Any]) -> None:
        if self._bus is not None:
            self._bus.publish(event, payload)
