"""Dashboard views: payload types, chart plans and the view coordinator."""

from .view_coordinator import DataProvider, ViewCoordinator  # noqa: F401
from .view_models import (  # noqa: F401
    BrowserView,
    ChartPlan,
    GoalProgress,
    LaptopView,
    MobileView,
    OverallView,
    ShareView,
    TimePeriod,
    ViewPayload,
    ViewType,
    WeeklyStats,
    plan_charts,
)
