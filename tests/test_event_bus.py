from timewise.services.event_bus import DashboardEvent, EventBus


def test_subscribe_publish_basic():
    bus = EventBus()
    received = []
    bus.subscribe(DashboardEvent.VIEW_CHANGED, lambda evt: received.append((evt.name, evt.payload)))
    bus.publish(DashboardEvent.VIEW_CHANGED, {"view": "mobile"})
    assert received == [("view_changed", {"view": "mobile"})]


def test_enum_and_string_names_are_interchangeable():
    bus = EventBus()
    received = []
    bus.subscribe("chart_created", lambda evt: received.append(evt.payload))
    bus.publish(DashboardEvent.CHART_CREATED, 1)
    assert received == [1]


def test_once_subscription():
    bus = EventBus()
    count = []
    bus.subscribe(DashboardEvent.STARTUP_COMPLETE, lambda _e: count.append(1), once=True)
    bus.publish(DashboardEvent.STARTUP_COMPLETE)
    bus.publish(DashboardEvent.STARTUP_COMPLETE)
    assert count == [1]
    assert bus.subscriber_count(DashboardEvent.STARTUP_COMPLETE) == 0


def test_error_isolation():
    bus = EventBus()
    order = []

    def bad(_):
        order.append("bad")
        raise RuntimeError("boom")

    bus.subscribe("custom", bad)
    bus.subscribe("custom", lambda _e: order.append("good"))
    bus.publish("custom", 123)
    assert order == ["bad", "good"]
    assert len(bus.errors) == 1


def test_unsubscribe_and_cancel():
    bus = EventBus()
    seen = []
    sub = bus.subscribe("x", lambda e: seen.append(e.payload))
    other = bus.subscribe("x", lambda e: seen.append(("other", e.payload)))
    bus.unsubscribe(sub)
    other.cancel()
    bus.publish("x", 1)
    assert seen == []


def test_handler_may_subscribe_during_publish():
    bus = EventBus()
    late = []
    bus.subscribe("x", lambda _e: bus.subscribe("x", lambda e: late.append(e.payload)))
    bus.publish("x", 1)
    assert late == []
    bus.publish("x", 2)
    assert late == [2]


def test_tracing_ring_buffer():
    bus = EventBus()
    bus.enable_tracing(True, capacity=2)
    for i in range(3):
        bus.publish("tick", {"i": i, "pad": "x" * 50})
    traces = bus.recent_traces()
    assert [t[0] for t in traces] == ["tick", "tick"]
    assert traces[-1][2].endswith("...")
