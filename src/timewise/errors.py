"""Error taxonomy for the dashboard core.

Only ``MalformedSeriesError`` is ever raised to callers. Resolution failures
become no-ops (plus a log line / event), abandoned animations resolve their
completion with an ``abandoned`` outcome and an ``AnimationAbandoned`` reason,
and capacity eviction is a designed outcome of the notification center rather
than a failure.
"""

from __future__ import annotations

from typing import Any, Sequence


class DashboardError(Exception):
    """Base class for dashboard core issues."""

    def __init__(self, message: str, *, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.context = context or {}


class ResolutionError(DashboardError):
    """A surface or element id has no backing resource in the host."""


class AnimationAbandoned(DashboardError):
    """Target element vanished while a transition was running."""


class CapacityEviction(DashboardError):
    """Notification dropped to make room under the live capacity cap."""


class MalformedSeriesError(DashboardError, ValueError):
    """Series or options failed structural validation.

    ``issues`` lists every problem found (not just the first) so callers can
    log a complete picture before choosing fallback data.
    """

    def __init__(
        self,
        issues: Sequence[str],
        *,
        surface_id: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        self.issues = list(issues)
        self.surface_id = surface_id
        where = f" for surface '{surface_id}'" if surface_id else ""
        summary = "; ".join(self.issues) if self.issues else "unknown problem"
        super().__init__(f"Malformed series{where}: {summary}", context=context)


__all__ = [
    "DashboardError",
    "ResolutionError",
    "AnimationAbandoned",
    "CapacityEviction",
    "MalformedSeriesError",
]
