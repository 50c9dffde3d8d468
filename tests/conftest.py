# Shared fixtures. Qt runs offscreen and matplotlib on Agg so the suite works
# without a display; headless tests drive time through ManualScheduler.

import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
os.environ.setdefault("MPLBACKEND", "Agg")

import pytest

from timewise.animation.sequencer import AnimationSequencer
from timewise.charting.registry import ChartRegistry
from timewise.design.reduced_motion import set_reduced_motion, is_reduced_motion
from timewise.services.error_handling_service import ErrorHandlingService
from timewise.services.event_bus import EventBus
from timewise.services.notification_center import NotificationCenter
from timewise.testing import (
    FakeElementResolver,
    ManualScheduler,
    RecordingBackend,
    RecordingPresenter,
)

SURFACES = ("deviceChart", "categoryChart", "mobileChart", "laptopChart", "dailyChart")


@pytest.fixture(autouse=True)
def _full_motion():
    prev = is_reduced_motion()
    set_reduced_motion(False)
    yield
    set_reduced_motion(prev)


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def elements():
    return FakeElementResolver()


@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def events(bus):
    """Every published event name, in order."""
    seen = []
    original = bus.publish

    def record(name, payload=None):
        evt = original(name, payload)
        seen.append((evt.name, evt.payload))
        return evt

    bus.publish = record  # type: ignore[method-assign]
    return seen


@pytest.fixture
def backend():
    return RecordingBackend(SURFACES)


@pytest.fixture
def registry(backend, bus):
    return ChartRegistry(backend, event_bus=bus, clock=lambda: 100.0)


@pytest.fixture
def error_service(bus):
    return ErrorHandlingService(event_bus=bus)


@pytest.fixture
def sequencer(scheduler, elements, error_service):
    return AnimationSequencer(scheduler, elements, error_service=error_service)


@pytest.fixture
def presenter():
    return RecordingPresenter()


@pytest.fixture
def center(scheduler, presenter, bus):
    return NotificationCenter(scheduler, presenter=presenter, event_bus=bus)
