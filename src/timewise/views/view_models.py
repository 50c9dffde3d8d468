"""View payloads and chart plans.

Each dashboard view hands the coordinator its own frozen payload type; the
coordinator and the planning helpers below dispatch on the payload class
with ``match``. Payloads are already validated display data: times are
preformatted strings (``"6h 12m"``), chart inputs are ``ChartData``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Tuple, Union

from ..charting.types import ChartData, ChartKind, Series

__all__ = [
    "ViewType",
    "TimePeriod",
    "WeeklyStats",
    "OverallView",
    "BrowserView",
    "MobileView",
    "LaptopView",
    "ShareView",
    "ViewPayload",
    "ChartPlan",
    "GoalProgress",
    "VIEW_TITLES",
    "VIEW_NAMES",
    "plan_charts",
    "view_type_of",
    "headline_values",
    "card_element_ids",
    "parse_time_to_minutes",
]


class ViewType(str, Enum):
    OVERALL = "overall"
    BROWSER = "browser"
    MOBILE = "mobile"
    LAPTOP = "laptop"
    SHARE = "share"


class TimePeriod(str, Enum):
    TODAY = "today"
    WEEK = "week"

    @property
    def multiplier(self) -> int:
        return 7 if self is TimePeriod.WEEK else 1

    @property
    def adjective(self) -> str:
        return "weekly" if self is TimePeriod.WEEK else "daily"


VIEW_TITLES: Dict[ViewType, str] = {
    ViewType.BROWSER: "Browser Time",
    ViewType.MOBILE: "Mobile Screen Time",
    ViewType.LAPTOP: "Laptop Usage",
    ViewType.OVERALL: "Digital Time",
    ViewType.SHARE: "Screen Time",
}

VIEW_NAMES: Dict[ViewType, str] = {
    ViewType.OVERALL: "Overall Dashboard",
    ViewType.BROWSER: "Browser Analytics",
    ViewType.MOBILE: "Mobile Insights",
    ViewType.LAPTOP: "Laptop Tracking",
    ViewType.SHARE: "Share Statistics",
}

# Weekly bar colors
PRODUCTIVE = "#4caf50"
ENTERTAINMENT = "#ff9800"
SOCIAL = "#2196f3"
SCREEN_TIME = "#4a90e2"
IDLE = "#ff9800"


@dataclass(frozen=True)
class WeeklyStats:
    labels: Tuple[str, ...] = ()
    screen_time: Tuple[float, ...] = ()
    pickups: Tuple[float, ...] = ()
    productive: Tuple[float, ...] = ()
    entertainment: Tuple[float, ...] = ()
    social: Tuple[float, ...] = ()
    idle: Tuple[float, ...] = ()


@dataclass(frozen=True)
class OverallView:
    today_time: str
    week_time: str
    devices: ChartData
    categories: ChartData
    focus_score: int = 0
    weekly: WeeklyStats = field(default_factory=WeeklyStats)


@dataclass(frozen=True)
class BrowserView:
    today_time: str
    week_time: str
    categories: ChartData
    weekly: WeeklyStats


@dataclass(frozen=True)
class MobileView:
    today_time: str
    week_time: str
    pickups: int
    avg_session: str
    notifications: int
    most_used: str
    apps: ChartData
    weekly: WeeklyStats


@dataclass(frozen=True)
class LaptopView:
    today_time: str
    week_time: str
    active_time: str
    idle_time: str
    applications: ChartData
    weekly: WeeklyStats


@dataclass(frozen=True)
class ShareView:
    today_time: str
    week_time: str
    daily: WeeklyStats
    categories: ChartData


ViewPayload = Union[OverallView, BrowserView, MobileView, LaptopView, ShareView]


@dataclass(frozen=True)
class ChartPlan:
    surface_id: str
    kind: ChartKind
    data: ChartData


def _doughnut(surface_id: str, data: ChartData) -> ChartPlan:
    return ChartPlan(surface_id, ChartKind.DOUGHNUT, data)


def _bar(surface_id: str, labels: Tuple[str, ...], *series: Tuple[str, Tuple[float, ...], str]) -> ChartPlan:
    return ChartPlan(
        surface_id,
        ChartKind.BAR,
        ChartData(labels=labels, series=tuple(Series(label, tuple(values), color) for label, values, color in series)),
    )


def plan_charts(payload: ViewPayload, period: TimePeriod) -> List[ChartPlan]:
    """Charts to materialize for ``payload`` in ``period``, in display order."""
    week = period is TimePeriod.WEEK
    match payload:
        case OverallView(devices=devices, categories=categories):
            return [_doughnut("deviceChart", devices), _doughnut("categoryChart", categories)]
        case BrowserView(categories=categories, weekly=weekly) if week:
            return [
                _bar(
                    "categoryChart",
                    weekly.labels,
                    ("Productive", weekly.productive, PRODUCTIVE),
                    ("Entertainment", weekly.entertainment, ENTERTAINMENT),
                    ("Social", weekly.social, SOCIAL),
                )
            ]
        case BrowserView(categories=categories):
            return [_doughnut("categoryChart", categories)]
        case MobileView(weekly=weekly) if week:
            return [_bar("mobileChart", weekly.labels, ("Screen Time (hrs)", weekly.screen_time, SCREEN_TIME))]
        case MobileView(apps=apps):
            return [_doughnut("mobileChart", apps)]
        case LaptopView(weekly=weekly) if week:
            return [
                _bar(
                    "laptopChart",
                    weekly.labels,
                    ("Productive", weekly.productive, PRODUCTIVE),
                    ("Idle", weekly.idle, IDLE),
                )
            ]
        case LaptopView(applications=applications):
            return [_doughnut("laptopChart", applications)]
        case ShareView(daily=daily, categories=categories):
            return [
                _bar("dailyChart", daily.labels, ("Screen Time (hrs)", daily.screen_time, SCREEN_TIME)),
                _doughnut("categoryChart", categories),
            ]
    raise TypeError(f"Unsupported view payload: {type(payload).__name__}")


def view_type_of(payload: ViewPayload) -> ViewType:
    match payload:
        case OverallView():
            return ViewType.OVERALL
        case BrowserView():
            return ViewType.BROWSER
        case MobileView():
            return ViewType.MOBILE
        case LaptopView():
            return ViewType.LAPTOP
        case ShareView():
            return ViewType.SHARE
    raise TypeError(f"Unsupported view payload: {type(payload).__name__}")


def headline_values(payload: ViewPayload, period: TimePeriod) -> Dict[str, str]:
    """Element id -> text for the headline and stat cards."""
    week = period is TimePeriod.WEEK
    title = VIEW_TITLES[view_type_of(payload)]
    values = {
        "totalTime": payload.week_time if week else payload.today_time,
        "totalTimeTitle": f"Total {title} This Week" if week else f"Total {title} Today",
    }
    match payload:
        case MobileView(pickups=pickups, avg_session=avg, notifications=notes, most_used=most):
            values.update(
                {
                    "stat-pickups": str(pickups * period.multiplier),
                    "stat-avg-session": avg,
                    "stat-notifications": str(notes * period.multiplier),
                    "stat-most-used": most,
                }
            )
        case LaptopView(active_time=active, idle_time=idle):
            values.update({"stat-active-time": active, "stat-idle-time": idle})
        case OverallView(focus_score=score):
            values["stat-focus-score"] = str(score)
    return values


def card_element_ids(payload: ViewPayload, plans: List[ChartPlan]) -> List[str]:
    """Animated containers: total-time card, chart containers, stat cards."""
    stats = [k for k in headline_values(payload, TimePeriod.TODAY) if k.startswith("stat-")]
    return ["total-time-card"] + [f"{p.surface_id}-container" for p in plans] + [f"{s}-card" for s in stats]


_TIME_PART = re.compile(r"^(\d+)([hms])$")


def parse_time_to_minutes(text: str) -> int:
    """``'1h 37m'`` -> 97. Unknown parts are ignored; seconds round to minutes."""
    minutes = 0.0
    for part in str(text or "").split():
        m = _TIME_PART.match(part)
        if m is None:
            continue
        value, unit = int(m.group(1)), m.group(2)
        minutes += value * 60 if unit == "h" else value if unit == "m" else round(value / 60)
    return int(minutes)


@dataclass(frozen=True)
class GoalProgress:
    name: str
    actual: str
    goal: str

    @property
    def percent(self) -> int:
        goal = parse_time_to_minutes(self.goal)
        if goal == 0:
            return 0
        return min(100, round(parse_time_to_minutes(self.actual) / goal * 100))

    @property
    def element_id(self) -> str:
        return "goal-" + re.sub(r"[^a-z0-9]+", "-", self.name.lower()).strip("-") + "-bar"
