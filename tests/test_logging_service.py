import json
import logging

import pytest

from timewise.services.event_bus import DashboardEvent, EventBus
from timewise.services.logging_service import LoggingService


@pytest.fixture()
def setup_logging():
    bus = EventBus()
    svc = LoggingService(capacity=5, event_bus=bus)
    svc.attach()
    yield svc, bus
    svc.detach()


def test_logging_capture_and_retrieve(setup_logging):
    svc, _ = setup_logging
    logging.getLogger("alpha").info("Hello World")
    assert any(e.message == "Hello World" for e in svc.recent())


def test_logging_capacity_eviction(setup_logging):
    svc, _ = setup_logging
    for i in range(10):
        logging.getLogger("cap").info("M%d", i)
    recents = svc.recent()
    assert len(recents) == 5
    assert recents[0].message == "M5"
    assert [e.message for e in svc.recent(limit=2)] == ["M8", "M9"]


def test_logging_filtering(setup_logging):
    svc, _ = setup_logging
    logging.getLogger("timewise.charting").debug("drawn")
    logging.getLogger("timewise.views").info("View shown")
    info_only = svc.filter(level="INFO")
    assert info_only and all(e.level == "INFO" for e in info_only)
    charting = svc.filter(name_contains="charting")
    assert charting and all("charting" in e.name for e in charting)


def test_logging_event_emission(setup_logging):
    svc, bus = setup_logging
    payloads = []
    bus.subscribe(DashboardEvent.LOG_RECORD_ADDED, lambda evt: payloads.append(evt.payload))
    logging.getLogger("evt").warning("Something happened")
    assert payloads and payloads[-1]["level"] == "WARNING"


def test_export_jsonl(setup_logging, tmp_path):
    svc, _ = setup_logging
    logging.getLogger("export").error("one")
    logging.getLogger("export").info("two")
    path = tmp_path / "log.jsonl"
    assert svc.export_jsonl(path, level="ERROR") == 1
    rows = [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]
    assert rows[0]["message"] == "one" and rows[0]["name"] == "export"


def test_attach_is_idempotent_and_detach_stops_capture():
    svc = LoggingService()
    svc.attach()
    svc.attach()
    assert svc.attached
    svc.detach()
    logging.getLogger("after").warning("ignored")
    assert svc.recent() == []
