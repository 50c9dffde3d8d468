"""Bounded, auto-expiring notification queue.

The center owns notification state and timing; drawing is delegated to a
``NotificationPresenter`` (``ToastHost`` in the real UI) and the exit
transition to the ``AnimationSequencer``. Without a sequencer dismissed
notifications are removed immediately.

Capacity: at most ``max_live`` live non-persistent entries. Posting a
non-persistent notification into a full center evicts the oldest
non-persistent entry first. Persistent entries never count toward the cap
and are never evicted, so the total can exceed ``max_live`` (the cap is soft).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Dict, List, Optional, Protocol, Sequence, Tuple

from ..animation.tasks import slide_left, slide_right
from ..design.notifications import SEVERITIES, get_notification_style
from ..errors import CapacityEviction
from .event_bus import DashboardEvent, EventBus
from .scheduler import HostScheduler, TimerHandle

if TYPE_CHECKING:  # pragma: no cover
    from ..animation.sequencer import AnimationSequencer

__all__ = [
    "Notification",
    "NotificationAction",
    "NotificationCenter",
    "NotificationHandle",
    "NotificationPresenter",
    "DEFAULT_MAX_LIVE",
    "EXIT_DURATION_MS",
]

log = logging.getLogger(__name__)

DEFAULT_MAX_LIVE = 5
EXIT_DURATION_MS = 400
ENTER_DURATION_MS = 300
MIN_RESUME_MS = 50

NotificationHandle = int


@dataclass(frozen=True)
class NotificationAction:
    label: str
    effect: Callable[[], None]


@dataclass
class Notification:
    id: int
    message: str
    severity: str
    created_at: float
    ttl_ms: Optional[float]
    persistent: bool = False
    actions: Tuple[NotificationAction, ...] = ()
    leaving: bool = False

    @property
    def element_id(self) -> str:
        return f"notification-{self.id}"

    @property
    def icon(self) -> str:
        return get_notification_style(self.severity).icon


class NotificationPresenter(Protocol):  # pragma: no cover - structural only
    def show(self, notification: Notification) -> None: ...

    def remove(self, notification_id: int) -> None: ...


@dataclass
class _Expiry:
    timer: Optional[TimerHandle] = None
    deadline_ms: float = 0.0
    remaining_ms: Optional[float] = None


class NotificationCenter:
    def __init__(
        self,
        scheduler: HostScheduler,
        *,
        sequencer: "AnimationSequencer | None" = None,
        presenter: NotificationPresenter | None = None,
        event_bus: EventBus | None = None,
        max_live: int = DEFAULT_MAX_LIVE,
    ) -> None:
        if max_live < 1:
            raise ValueError("max_live must be at least 1")
        self._scheduler = scheduler
        self._sequencer = sequencer
        self._presenter = presenter
        self._bus = event_bus
        self._max_live = max_live
        self._entries: Dict[int, Notification] = {}
        self._expiry: Dict[int, _Expiry] = {}
        self._next_id = 1

    @property
    def max_live(self) -> int:
        return self._max_live

    def set_presenter(self, presenter: NotificationPresenter | None) -> None:
        self._presenter = presenter

    # ---------------- Posting -----------------------------------------
    def post(
        self,
        message: str,
        severity: str = "info",
        *,
        ttl_ms: float | None = None,
        persistent: bool = False,
        actions: Sequence[NotificationAction] = (),
    ) -> NotificationHandle:
        if severity not in SEVERITIES:
            raise ValueError(f"Unknown notification severity: {severity}")
        style = get_notification_style(severity)
        ttl = None if persistent else float(style.default_timeout_ms if ttl_ms is None else ttl_ms)
        if ttl is not None and ttl < 0:
            raise ValueError("ttl_ms must not be negative")

        if not persistent and self.transient_count() >= self._max_live:
            self._evict_oldest()

        nid = self._next_id
        self._next_id += 1
        note = Notification(
            id=nid,
            message=message,
            severity=severity,
            created_at=self._scheduler.now_ms(),
            ttl_ms=ttl,
            persistent=persistent,
            actions=tuple(actions),
        )
        self._entries[nid] = note
        if self._presenter is not None:
            self._presenter.show(note)
        if self._sequencer is not None:
            self._sequencer.run(note.element_id, slide_left(ENTER_DURATION_MS, distance=40.0))
        if ttl is not None:
            self._arm(nid, ttl)
        log.debug("Notification %d posted (%s): %s", nid, severity, message)
        self._publish(
            DashboardEvent.NOTIFICATION_POSTED,
            {"id": nid, "severity": severity, "message": message, "persistent": persistent},
        )
        return nid

    def info(self, message: str, **kw) -> NotificationHandle:
        return self.post(message, "info", **kw)

    def success(self, message: str, **kw) -> NotificationHandle:
        return self.post(message, "success", **kw)

    def warning(self, message: str, **kw) -> NotificationHandle:
        return self.post(message, "warning", **kw)

    def error(self, message: str, **kw) -> NotificationHandle:
        return self.post(message, "error", **kw)

    def _evict_oldest(self) -> None:
        victim = next(n for n in self._entries.values() if not n.persistent and not n.leaving)
        reason = CapacityEviction(
            f"Notification {victim.id} evicted (capacity {self._max_live})",
            context={"id": victim.id},
        )
        log.debug("%s", reason)
        self._disarm(victim.id)
        if self._sequencer is not None:
            self._sequencer.cancel(victim.element_id)
        self._remove(victim.id)
        self._publish(
            DashboardEvent.NOTIFICATION_EVICTED,
            {"id": victim.id, "severity": victim.severity, "reason": str(reason)},
        )

    # ---------------- Dismissal ---------------------------------------
    def dismiss(self, handle: NotificationHandle) -> bool:
        note = self._entries.get(handle)
        if note is None or note.leaving:
            return False
        note.leaving = True
        self._disarm(handle)
        self._publish(DashboardEvent.NOTIFICATION_DISMISSED, {"id": handle, "severity": note.severity})
        if self._sequencer is None:
            self._remove(handle)
            return True
        self._sequencer.cancel(note.element_id)
        done = self._sequencer.run(note.element_id, slide_right(EXIT_DURATION_MS, distance=100.0))
        done.add_done_callback(lambda _c, nid=handle: self._remove(nid))
        return True

    def dismiss_all(self) -> int:
        return sum(1 for nid in list(self._entries) if self.dismiss(nid))

    def _remove(self, handle: NotificationHandle) -> None:
        if self._entries.pop(handle, None) is None:
            return
        self._expiry.pop(handle, None)
        if self._presenter is not None:
            self._presenter.remove(handle)

    # ---------------- Expiry ------------------------------------------
    def _arm(self, handle: NotificationHandle, delay_ms: float) -> None:
        exp = self._expiry.setdefault(handle, _Expiry())
        exp.deadline_ms = self._scheduler.now_ms() + delay_ms
        exp.remaining_ms = None
        exp.timer = self._scheduler.call_later(delay_ms, lambda nid=handle: self._expire(nid))

    def _disarm(self, handle: NotificationHandle) -> None:
        exp = self._expiry.pop(handle, None)
        if exp is not None and exp.timer is not None:
            exp.timer.cancel()

    def _expire(self, handle: NotificationHandle) -> None:
        exp = self._expiry.get(handle)
        if exp is not None:
            exp.timer = None
        log.debug("Notification %d expired", handle)
        self.dismiss(handle)

    def pause_expiry(self, handle: NotificationHandle) -> bool:
        """Stop the ttl clock, keeping the remaining time (hover)."""
        exp = self._expiry.get(handle)
        if exp is None or exp.timer is None or exp.remaining_ms is not None:
            return False
        exp.timer.cancel()
        exp.timer = None
        exp.remaining_ms = max(0.0, exp.deadline_ms - self._scheduler.now_ms())
        return True

    def resume_expiry(self, handle: NotificationHandle) -> bool:
        exp = self._expiry.get(handle)
        if exp is None or exp.remaining_ms is None:
            return False
        self._arm(handle, max(MIN_RESUME_MS, exp.remaining_ms))
        return True

    def is_paused(self, handle: NotificationHandle) -> bool:
        exp = self._expiry.get(handle)
        return exp is not None and exp.remaining_ms is not None

    # ---------------- Actions -----------------------------------------
    def invoke_action(self, handle: NotificationHandle, index: int) -> bool:
        """Run the action's effect, then dismiss the notification."""
        note = self._entries.get(handle)
        if note is None or note.leaving:
            return False
        try:
            action = note.actions[index]
        except IndexError:
            raise IndexError(f"Notification {handle} has no action {index}") from None
        try:
            action.effect()
        except Exception:  # noqa: BLE001 - a broken action must not pin the toast
            log.exception("Notification action '%s' failed", action.label)
        self.dismiss(handle)
        return True

    # ---------------- Introspection -----------------------------------
    def count(self) -> int:
        return sum(1 for n in self._entries.values() if not n.leaving)

    def transient_count(self) -> int:
        """Live non-persistent entries; the figure ``max_live`` caps."""
        return sum(1 for n in self._entries.values() if not n.persistent and not n.leaving)

    def live(self) -> List[Notification]:
        return [n for n in self._entries.values() if not n.leaving]

    def get(self, handle: NotificationHandle) -> Notification | None:
        return self._entries.get(handle)

    def __contains__(self, handle: object) -> bool:
        return handle in self._entries

    def _publish(self, event: DashboardEvent, payload) -> None:
        if self._bus is not None:
            self._bus.publish(event, payload)
