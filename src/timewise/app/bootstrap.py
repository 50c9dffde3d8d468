"""Application bootstrap for the Timewise dashboard.

Responsibilities:
 - Optional headless bootstrap (no QApplication; tests, CI, scripted use)
 - Loading ``DashboardConfig`` and applying the reduced-motion preference
 - Building the explicitly owned core: event bus, logging and error services,
   host scheduler, chart registry, animation sequencer, notification center
   and, when a data provider is given, the view coordinator
 - Returning a single context object holding references to all of it

Qt is imported lazily so importing this module stays cheap and headless
callers never construct a QApplication.
"""

from __future__ import annotations

import logging
import sys
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from ..animation.elements import ElementResolver, WidgetRegistry
from ..animation.sequencer import AnimationSequencer
from ..charting.registry import ChartRegistry
from ..charting.types import RenderBackend
from ..design.reduced_motion import is_reduced_motion, set_reduced_motion
from ..services.error_handling_service import ErrorHandlingService
from ..services.event_bus import DashboardEvent, EventBus
from ..services.logging_service import LoggingService
from ..services.notification_center import NotificationCenter
from ..services.scheduler import HostScheduler
from ..views.view_coordinator import DataProvider, ViewCoordinator
from .config_store import DashboardConfig, load_config, save_config
from .timing import TimingLogger

__all__ = ["AppContext", "create_app"]

log = logging.getLogger(__name__)


@dataclass
class AppContext:
    """Container with references created during bootstrap.

    Attributes
    ----------
    qt_app: The QApplication instance (None when headless)
    headless: Whether headless bootstrap was used
    config: Effective dashboard configuration
    widgets: Widget registry when the default Qt resolver is used, else None
    coordinator: View coordinator (None when no data provider was given)
    config_dir: Directory ``persist_config`` writes to (None: working dir)
    """

    qt_app: Optional[Any]
    headless: bool
    config: DashboardConfig
    event_bus: EventBus
    logging_service: LoggingService
    error_service: ErrorHandlingService
    scheduler: HostScheduler
    resolver: ElementResolver
    widgets: Optional[WidgetRegistry]
    backend: RenderBackend
    registry: ChartRegistry
    sequencer: AnimationSequencer
    notifications: NotificationCenter
    coordinator: Optional[ViewCoordinator]
    timing: TimingLogger
    config_dir: Optional[Path] = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def persist_config(self) -> Path:
        return save_config(self.config, self.config_dir)

    def shutdown(self) -> None:
        """Cancel transitions, release chart resources and detach services."""
        self.notifications.dismiss_all()
        # cancelled exit transitions still remove their toasts
        self.sequencer.cancel_all()
        released = self.registry.destroy_all()
        log.info("Shutdown released %d chart resource(s)", released)
        self.error_service.uninstall()
        self.logging_service.detach()


def _qt_application():
    from PyQt6.QtWidgets import QApplication

    return QApplication.instance() or QApplication(sys.argv[:1])  # minimal argv


def create_app(
    *,
    headless: bool | None = None,
    config: DashboardConfig | None = None,
    config_dir: str | Path | None = None,
    scheduler: HostScheduler | None = None,
    backend: RenderBackend | None = None,
    resolver: ElementResolver | None = None,
    data_provider: DataProvider | None = None,
    install_excepthook: bool = False,
) -> AppContext:
    """Create and wire the dashboard core.

    Parameters
    ----------
    headless: Skip QApplication creation. Defaults to True when a scheduler
        is injected (the caller drives time), False otherwise.
    config: Explicit configuration; when None it is loaded from ``config_dir``.
    scheduler / backend / resolver: Host adapters. Defaults are the Qt
        scheduler, the matplotlib backend and a ``WidgetRegistry``.
    data_provider: Enables the ``ViewCoordinator``.
    install_excepthook: Route uncaught exceptions to the error service.
    """
    started = time.perf_counter()
    if headless is None:
        headless = scheduler is not None
    base_dir = Path(config_dir) if config_dir is not None else None

    timing = TimingLogger()

    qt_app = None
    if not headless:
        with timing.measure("create_qapplication"):
            qt_app = _qt_application()

    with timing.measure("load_config"):
        if config is None:
            config = load_config(base_dir)
        if config.reduced_motion:
            set_reduced_motion(True)

    with timing.measure("core_services"):
        bus = EventBus()
        logging_service = LoggingService(event_bus=bus)
        logging_service.attach(logging.INFO)
        error_service = ErrorHandlingService(event_bus=bus)
        if install_excepthook:
            error_service.install()

    with timing.measure("host_adapters"):
        if scheduler is None:
            from ..services.qt_scheduler import QtHostScheduler

            scheduler = QtHostScheduler(
                frame_interval_ms=config.frame_interval_ms, error_service=error_service
            )
        widgets: Optional[WidgetRegistry] = None
        if resolver is None:
            widgets = WidgetRegistry()
            resolver = widgets
        if backend is None:
            from ..charting.backends import MatplotlibChartBackend

            backend = MatplotlibChartBackend()

    with timing.measure("dashboard_core"):
        registry = ChartRegistry(backend, event_bus=bus)
        sequencer = AnimationSequencer(scheduler, resolver, error_service=error_service)
        notifications = NotificationCenter(
            scheduler,
            sequencer=sequencer,
            event_bus=bus,
            max_live=config.max_live_notifications,
        )
        coordinator = None
        if data_provider is not None:
            coordinator = ViewCoordinator(
                registry,
                sequencer,
                notifications,
                data_provider,
                event_bus=bus,
                entrance_stagger_ms=config.entrance_stagger_ms,
                update_stagger_ms=config.update_stagger_ms,
                view=config.default_view,
                period=config.default_period,
            )

    timing.stop()

    ctx = AppContext(
        qt_app=qt_app,
        headless=headless,
        config=config,
        event_bus=bus,
        logging_service=logging_service,
        error_service=error_service,
        scheduler=scheduler,
        resolver=resolver,
        widgets=widgets,
        backend=backend,
        registry=registry,
        sequencer=sequencer,
        notifications=notifications,
        coordinator=coordinator,
        timing=timing,
        config_dir=base_dir,
        metadata={
            "started_at": started,
            "startup_timing": timing.as_dict(),
            "config": config.to_dict(),
            "reduced_motion": is_reduced_motion(),
        },
    )
    log.info("Timewise core ready in %.1f ms", timing.total_duration * 1000)
    bus.publish(DashboardEvent.STARTUP_COMPLETE, {"headless": headless, "duration_s": timing.total_duration})
    return ctx
