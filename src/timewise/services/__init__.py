"""Service layer exports.

Responsibilities:
 - EventBus publish/subscribe core
 - Log ring buffer and error capture
 - Host scheduler protocol (Qt implementation in ``qt_scheduler``)

``notification_center`` and ``qt_scheduler`` are imported from their modules
directly; they pull in the animation layer and Qt respectively.
"""

from .event_bus import DashboardEvent, Event, EventBus, Subscription  # noqa: F401
from .error_handling_service import ErrorHandlingService, ErrorRecord  # noqa: F401
from .logging_service import LogEntry, LoggingService  # noqa: F401
from .scheduler import HostScheduler, TimerHandle  # noqa: F401

__all__ = [
    "DashboardEvent",
    "Event",
    "EventBus",
    "Subscription",
    "ErrorHandlingService",
    "ErrorRecord",
    "LogEntry",
    "LoggingService",
    "HostScheduler",
    "TimerHandle",
]
