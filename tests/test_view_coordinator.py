"""View coordinator: chart plans, headline updates, failure surfacing."""

from __future__ import annotations

import pytest

from timewise.animation import slide_up
from timewise.charting import ChartData, ChartKind
from timewise.services.notification_center import NotificationCenter
from timewise.views import GoalProgress, OverallView, TimePeriod, ViewCoordinator, ViewType
from timewise.views.view_models import card_element_ids, headline_values, parse_time_to_minutes, plan_charts

from tests.factories import CATEGORIES, DAYS, PAYLOADS, StubProvider


@pytest.fixture
def provider():
    return StubProvider(PAYLOADS)


@pytest.fixture
def coordinator(registry, sequencer, center, provider, bus):
    return ViewCoordinator(registry, sequencer, center, provider, event_bus=bus)


def test_overall_view_draws_both_doughnuts(coordinator, registry, events):
    coordinator.show_view("overall")
    assert sorted(registry.surface_ids()) == ["categoryChart", "deviceChart"]
    assert registry.get("deviceChart").kind is ChartKind.DOUGHNUT
    assert coordinator.card_ids == [
        "total-time-card",
        "deviceChart-container",
        "categoryChart-container",
        "stat-focus-score-card",
    ]
    assert ("view_changed", {"view": "overall", "period": "today"}) in events


def test_headlines_are_set_on_show(coordinator, elements, scheduler):
    total = elements.add("totalTime", text="--")
    title = elements.add("totalTimeTitle", text="")
    coordinator.show_view(ViewType.MOBILE)
    scheduler.run_frames(1)
    assert total.get_property("text") == "3h 10m"
    assert title.get_property("text") == "Total Mobile Screen Time Today"


def test_entrance_is_staggered(coordinator, elements, scheduler):
    first = elements.add("total-time-card")
    second = elements.add("deviceChart-container")
    coordinator.show_view(ViewType.OVERALL)
    assert first.get_property("translate_y") == 20.0
    assert second.history == []
    scheduler.advance(100)
    assert second.values_of("translate_y")[0] == 20.0
    scheduler.run_until_idle()
    assert first.get_property("translate_y") == 0.0
    assert second.get_property("opacity") == 1.0


def test_switching_views_releases_previous_charts(coordinator, registry, backend):
    coordinator.show_view(ViewType.OVERALL)
    coordinator.show_view(ViewType.MOBILE)
    assert registry.surface_ids() == ["mobileChart"]
    assert backend.ops("dispose") == ["deviceChart", "categoryChart"]
    assert coordinator.current_view is ViewType.MOBILE


def test_week_period_switches_to_bars(coordinator, registry, center, events):
    coordinator.show_view(ViewType.BROWSER)
    assert registry.get("categoryChart").kind is ChartKind.DOUGHNUT
    group = coordinator.set_period("week")
    assert group is not None
    res = registry.get("categoryChart")
    assert res.kind is ChartKind.BAR
    assert [s.label for s in res.series] == ["Productive", "Entertainment", "Social"]
    assert res.labels == list(DAYS)
    assert [n.message for n in center.live()] == ["Switched to weekly view"]
    assert ("period_changed", {"view": "browser", "period": "week"}) in events
    assert coordinator.set_period(TimePeriod.WEEK) is None


def test_week_headlines_animate(coordinator, elements, scheduler):
    pickups = elements.add("stat-pickups", text="58")
    title = elements.add("totalTimeTitle", text="")
    coordinator.show_view(ViewType.MOBILE)
    scheduler.run_until_idle()
    coordinator.set_period(TimePeriod.WEEK)
    scheduler.advance(500)
    middle = int(pickups.get_property("text"))
    assert 58 < middle < 406
    scheduler.run_until_idle()
    assert pickups.get_property("text") == "406"
    assert title.get_property("text") == "Total Mobile Screen Time This Week"


def test_period_switch_pulses_cards(coordinator, elements, scheduler):
    card = elements.add("total-time-card")
    coordinator.show_view(ViewType.LAPTOP)
    scheduler.run_until_idle()
    coordinator.set_period("week")
    scheduler.run_until_idle()
    scales = card.values_of("scale")
    assert max(scales) > 1.0 and scales[-1] == 1.0


def test_unavailable_surface_reports_once(coordinator, registry, backend, center):
    backend.remove_surface("dailyChart")
    coordinator.show_view(ViewType.SHARE)
    assert registry.surface_ids() == ["categoryChart"]
    assert [(n.severity, n.message) for n in center.live()] == [
        ("info", "1 chart not shown in this layout")
    ]
    assert len(coordinator.last_failures) == 1
    assert coordinator.card_ids == ["total-time-card", "categoryChart-container"]


def test_malformed_data_warns_and_keeps_other_charts(coordinator, registry, provider, center):
    provider.payloads[ViewType.OVERALL] = OverallView(
        "0m",
        "0m",
        devices=ChartData.from_flat(["Laptop", "Mobile"], [0, 0]),
        categories=CATEGORIES,
    )
    coordinator.show_view(ViewType.OVERALL)
    assert registry.surface_ids() == ["categoryChart"]
    notes = center.live()
    assert len(notes) == 1
    assert notes[0].severity == "warning"
    assert notes[0].message == "1 chart could not be drawn from the current data"


def test_refresh_rereads_current_view(coordinator, provider, registry):
    coordinator.show_view(ViewType.LAPTOP)
    provider.requests.clear()
    coordinator.refresh()
    assert provider.requests == [(ViewType.LAPTOP, TimePeriod.TODAY)]
    assert registry.get("laptopChart").kind is ChartKind.DOUGHNUT


def test_resize_and_teardown(coordinator, registry, backend):
    coordinator.show_view(ViewType.OVERALL)
    assert coordinator.handle_resize() == 2
    coordinator.teardown()
    assert len(registry) == 0


def test_view_switch_leaves_toast_animations_running(registry, sequencer, provider, elements, scheduler, bus):
    center = NotificationCenter(scheduler, sequencer=sequencer, event_bus=bus)
    coordinator = ViewCoordinator(registry, sequencer, center, provider, event_bus=bus)
    card = elements.add("total-time-card")
    coordinator.show_view(ViewType.OVERALL)
    toast = elements.add("notification-1")
    nid = center.info("Switched", ttl_ms=10_000)
    assert center.get(nid).element_id == "notification-1"
    scheduler.run_frames(2)
    coordinator.show_view(ViewType.BROWSER)
    assert sequencer.is_busy("notification-1")
    scheduler.advance(1000)
    assert toast.get_property("opacity") == 1.0
    assert toast.get_property("translate_x") == 0.0
    assert nid in center
    assert card.get_property("translate_y") == 0.0


def test_teardown_cancels_own_animations_only(coordinator, sequencer, elements, scheduler):
    elements.add("total-time-card")
    elements.add("other-widget")
    coordinator.show_view(ViewType.OVERALL)
    other = sequencer.run("other-widget", slide_up(500))
    assert sequencer.is_busy("total-time-card")
    coordinator.teardown()
    assert not sequencer.is_busy("total-time-card")
    assert sequencer.is_busy("other-widget")
    scheduler.run_until_idle()
    assert other.fully_completed


def test_welcome_message(coordinator, center):
    nid = coordinator.welcome()
    note = center.get(nid)
    assert note.message == "Welcome to Overall Dashboard!"
    assert note.ttl_ms == 3000


def test_goal_bars_fill_to_percentage(coordinator, elements, scheduler):
    bar = elements.add("goal-reading-bar")
    group = coordinator.animate_goals([GoalProgress("Reading", "1h 30m", "2h"), GoalProgress("Sleep", "9h", "8h")])
    scheduler.run_until_idle()
    assert bar.get_property("width_pct") == 75.0
    # no widget for the second goal
    assert group.done and not group.fully_completed


def test_time_parsing_and_goal_percent():
    assert parse_time_to_minutes("1h 37m") == 97
    assert parse_time_to_minutes("45s") == 1
    assert parse_time_to_minutes("soon") == 0
    assert GoalProgress("Sleep", "9h", "8h").percent == 100
    assert GoalProgress("Social Media", "1h", "0m").percent == 0
    assert GoalProgress("Social Media", "1h", "2h").element_id == "goal-social-media-bar"


def test_plans_per_view_and_period():
    week = TimePeriod.WEEK
    mobile_week = plan_charts(PAYLOADS[ViewType.MOBILE], week)
    assert [(p.surface_id, p.kind) for p in mobile_week] == [("mobileChart", ChartKind.BAR)]
    assert mobile_week[0].data.series[0].label == "Screen Time (hrs)"
    laptop_week = plan_charts(PAYLOADS[ViewType.LAPTOP], week)
    assert [s.label for s in laptop_week[0].data.series] == ["Productive", "Idle"]
    share = plan_charts(PAYLOADS[ViewType.SHARE], TimePeriod.TODAY)
    assert [(p.surface_id, p.kind) for p in share] == [
        ("dailyChart", ChartKind.BAR),
        ("categoryChart", ChartKind.DOUGHNUT),
    ]
    with pytest.raises(TypeError):
        plan_charts(object(), week)


def test_headline_values_scale_with_period():
    mobile = PAYLOADS[ViewType.MOBILE]
    today = headline_values(mobile, TimePeriod.TODAY)
    week = headline_values(mobile, TimePeriod.WEEK)
    assert today["stat-notifications"] == "112"
    assert week["stat-notifications"] == "784"
    assert week["totalTime"] == "22h 10m"
    cards = card_element_ids(mobile, plan_charts(mobile, TimePeriod.TODAY))
    assert cards[-1] == "stat-most-used-card"
