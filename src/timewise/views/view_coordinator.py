"""View coordinator: routes view/period/resize events into the core.

For the current (view, period) it asks the data provider for a payload,
materializes the view's chart plan through the registry, runs entrance or
update transitions on the view's cards and announces the change. Chart
failures are collected per cycle and surfaced as a single notification; the
remaining charts are still drawn.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, List, Optional, Protocol, Sequence, Set, Union

from ..animation.sequencer import AnimationSequencer
from ..animation.tasks import AnimationTask, GroupCompletion, numeric, pulse, slide_up
from ..charting.registry import ChartRegistry
from ..errors import DashboardError, MalformedSeriesError, ResolutionError
from ..services.event_bus import DashboardEvent, EventBus
from .view_models import (
    VIEW_NAMES,
    ChartPlan,
    GoalProgress,
    TimePeriod,
    ViewPayload,
    ViewType,
    card_element_ids,
    headline_values,
    plan_charts,
)

if TYPE_CHECKING:  # pragma: no cover
    from ..services.notification_center import NotificationCenter

__all__ = ["DataProvider", "ViewCoordinator"]

log = logging.getLogger(__name__)


class DataProvider(Protocol):  # pragma: no cover - structural only
    def view_data(self, view: ViewType, period: TimePeriod) -> ViewPayload: ...


class ViewCoordinator:
    def __init__(
        self,
        registry: ChartRegistry,
        sequencer: AnimationSequencer,
        notifications: "NotificationCenter",
        provider: DataProvider,
        *,
        event_bus: EventBus | None = None,
        entrance_stagger_ms: float = 100,
        update_stagger_ms: float = 50,
        view: ViewType | str = ViewType.OVERALL,
        period: TimePeriod | str = TimePeriod.TODAY,
    ) -> None:
        self._registry = registry
        self._sequencer = sequencer
        self._notifications = notifications
        self._provider = provider
        self._bus = event_bus
        self._entrance_stagger_ms = entrance_stagger_ms
        self._update_stagger_ms = update_stagger_ms
        self._view = ViewType(view)
        self._period = TimePeriod(period)
        self._cards: List[str] = []
        # element ids this coordinator has animated; teardown cancels only these
        self._animated: Set[str] = set()
        self.last_failures: List[DashboardError] = []

    @property
    def current_view(self) -> ViewType:
        return self._view

    @property
    def current_period(self) -> TimePeriod:
        return self._period

    @property
    def card_ids(self) -> List[str]:
        return list(self._cards)

    # ---------------- Operations --------------------------------------
    def show_view(self, view: Union[ViewType, str]) -> GroupCompletion:
        view = ViewType(view)
        self.teardown()
        self._view = view
        payload = self._provider.view_data(view, self._period)
        plans = self._materialize(payload)
        self._set_headlines(payload, animate=False)
        self._cards = card_element_ids(payload, plans)
        self._animated.update(self._cards)
        group = self._sequencer.run_group(
            self._cards, lambda _i: slide_up(), self._entrance_stagger_ms
        )
        log.info("View shown: %s (%s)", view.value, self._period.value)
        self._publish(DashboardEvent.VIEW_CHANGED, {"view": view.value, "period": self._period.value})
        return group

    def set_period(self, period: Union[TimePeriod, str]) -> Optional[GroupCompletion]:
        period = TimePeriod(period)
        if period is self._period:
            return None
        self._period = period
        payload = self._provider.view_data(self._view, period)
        plans = self._materialize(payload)
        self._set_headlines(payload, animate=True)
        self._cards = card_element_ids(payload, plans)
        group = self._pulse_cards()
        self._notifications.info(f"Switched to {period.adjective} view")
        self._publish(DashboardEvent.PERIOD_CHANGED, {"view": self._view.value, "period": period.value})
        return group

    def refresh(self) -> GroupCompletion:
        payload = self._provider.view_data(self._view, self._period)
        plans = self._materialize(payload)
        self._set_headlines(payload, animate=True)
        self._cards = card_element_ids(payload, plans)
        return self._pulse_cards()

    def handle_resize(self) -> int:
        return self._registry.resize_all()

    def teardown(self) -> None:
        """Stop this coordinator's animations and release every chart.

        Toasts animated by the notification center are left running.
        """
        for element_id in sorted(self._animated):
            self._sequencer.cancel(element_id)
        self._animated.clear()
        self._registry.destroy_all()

    def welcome(self) -> int:
        return self._notifications.info(f"Welcome to {VIEW_NAMES[self._view]}!", ttl_ms=3000)

    def animate_goals(self, goals: Sequence[GoalProgress]) -> GroupCompletion:
        """Fill each goal's progress bar to its percentage."""
        self._animated.update(g.element_id for g in goals)
        members = [self._sequencer.animate_dimension(g.element_id, g.percent) for g in goals]
        return GroupCompletion(members)

    # ---------------- Internals ---------------------------------------
    def _materialize(self, payload: ViewPayload) -> List[ChartPlan]:
        failures: List[DashboardError] = []
        drawn: List[ChartPlan] = []
        for plan in plan_charts(payload, self._period):
            try:
                resource = self._registry.create(
                    plan.surface_id, plan.kind, plan.data.series, labels=plan.data.labels or None
                )
            except MalformedSeriesError as e:
                log.warning("Chart '%s' skipped: %s", plan.surface_id, e)
                failures.append(e)
                continue
            if resource is None:
                failures.append(ResolutionError(f"Surface '{plan.surface_id}' is not available"))
                continue
            drawn.append(plan)
        self.last_failures = failures
        if failures:
            self._surface_failures(failures)
        return drawn

    def _surface_failures(self, failures: List[DashboardError]) -> None:
        malformed = any(isinstance(f, MalformedSeriesError) for f in failures)
        noun = "chart" if len(failures) == 1 else "charts"
        if malformed:
            self._notifications.warning(f"{len(failures)} {noun} could not be drawn from the current data")
        else:
            self._notifications.info(f"{len(failures)} {noun} not shown in this layout")

    def _set_headlines(self, payload: ViewPayload, *, animate: bool) -> None:
        for element_id, text in headline_values(payload, self._period).items():
            self._animated.add(element_id)
            if animate and not element_id.endswith("Title"):
                self._sequencer.animate_value(element_id, text)
            else:
                self._sequencer.run(element_id, _set_text(text))

    def _pulse_cards(self) -> GroupCompletion:
        self._animated.update(self._cards)
        return self._sequencer.run_group(self._cards, lambda _i: pulse(), self._update_stagger_ms)

    def _publish(self, event: DashboardEvent, payload) -> None:
        if self._bus is not None:
            self._bus.publish(event, payload)


def _set_text(text: str) -> AnimationTask:
    """Zero-length text task: lands on ``text`` on the next frame."""
    return numeric(text, duration_ms=0)
