"""Test doubles for the host adapters (scheduler, elements, backend, presenter)."""

from .fakes import (  # noqa: F401
    FakeElement,
    FakeElementResolver,
    ManualScheduler,
    ManualTimer,
    RecordingBackend,
    RecordingHandle,
    RecordingPresenter,
)
