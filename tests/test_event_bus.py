from dialog_host.services.event_bus import DialogEvent, EventBus


def test_subscribe_and_publish_order():
    bus = EventBus()
    order = []

    def h1(e):
        order.append(("h1", e.name))

    def h2(e):
        order.append(("h2", e.name))

    bus.subscribe(DialogEvent.DIALOG_OPENED, h1)
    bus.subscribe(DialogEvent.DIALOG_OPENED, h2)
    bus.publish(DialogEvent.DIALOG_OPENED, {"dialog_id": "a"})
    assert order == [
        ("h1", DialogEvent.DIALOG_OPENED.value),
        ("h2", DialogEvent.DIALOG_OPENED.value),
    ]


def test_once_subscription():
    bus = EventBus()
    count = 0

    def incr(_):
        nonlocal count
        count += 1

    bus.subscribe(DialogEvent.DIALOGS_READY, incr, once=True)
    bus.publish(DialogEvent.DIALOGS_READY)
    bus.publish(DialogEvent.DIALOGS_READY)
    assert count == 1
    assert bus.subscriber_count(DialogEvent.DIALOGS_READY) == 0


def test_error_isolation():
    bus = EventBus()
    order = []

    def bad(_):
        order.append("bad")
        raise RuntimeError("boom")

    def good(_):
        order.append("good")

    bus.subscribe("custom", bad)
    bus.subscribe("custom", good)
    bus.publish("custom", 123)
    assert order == ["bad", "good"]
    assert len(bus.errors) == 1


def test_unsubscribe_and_cancel():
    bus = EventBus()
    seen = []
    sub = bus.subscribe("x", lambda e: seen.append(1))
    sub2 = bus.subscribe("x", lambda e: seen.append(2))
    sub2.cancel()
    bus.publish("x")
    bus.unsubscribe(sub)
    bus.publish("x")
    assert seen == [1]
    assert "x" not in bus.list_events()


def test_handler_may_publish_again():
    bus = EventBus()
    seen = []
    bus.subscribe("first", lambda e: bus.publish("second", e.payload))
    bus.subscribe("second", lambda e: seen.append(e.payload))
    bus.publish("first", 7)
    assert seen == [7]


def test_tracing_ring_buffer():
    bus = EventBus()
    assert not bus.tracing_enabled
    bus.enable_tracing(True, capacity=2)
    for i in range(3):
        bus.publish(DialogEvent.DIALOG_CLOSED, {"dialog_id": f"d{i}"})
    entries = bus.recent_trace_entries()
    assert [e.name for e in entries] == [DialogEvent.DIALOG_CLOSED.value] * 2
    assert "d2" in entries[-1].summary


def test_service_publishes_lifecycle_payloads(service, events):
    service.register_dialog("a")
    service.show_dialog("a")
    name, payload = events[-1]
    assert name == DialogEvent.DIALOG_OPENED.value
    assert payload["dialog_id"] == "a"
    assert "timestamp" in payload
