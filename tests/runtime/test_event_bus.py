import io

from method_object.runtime.events import (
    CallEvent,
    CallFinished,
    CallStarted,
    RegistryFrozen,
)
from method_object.runtime.subscribers import HumanReadableLogSubscriber
from method_object.runtime.bus import EventBus
from method_object.messaging.bus import messenger
from method_object.messaging.renderer import CliRenderer


def test_event_bus_dispatch(bus_and_spy):
    bus, spy = bus_and_spy

    specific_received = []

    def specific_handler(event: CallStarted):
        specific_received.append(event)

    bus.subscribe(CallStarted, specific_handler)

    event1 = CallStarted(definition_name="D")
    bus.publish(event1)
    assert len(specific_received) == 1

    # Irrelevant event doesn't reach the specific handler
    event2 = CallFinished(definition_name="D")
    bus.publish(event2)
    assert len(specific_received) == 1

    # The spy (wildcard) received everything
    assert spy.events == [event1, event2]


def test_unsubscribe(bus_and_spy):
    bus, spy = bus_and_spy
    received = []
    bus.subscribe(CallStarted, received.append)

    bus.unsubscribe(CallStarted, received.append)
    bus.unsubscribe(CallStarted, received.append)  # unknown handlers are ignored
    bus.publish(CallStarted())

    assert received == []
    assert len(spy.events) == 1


def test_subscribing_to_a_base_event_receives_subclasses(bus_and_spy):
    bus, _ = bus_and_spy
    calls = []
    bus.subscribe(CallEvent, calls.append)

    started = CallStarted(definition_name="D")
    bus.publish(RegistryFrozen(definition_name="D"))
    bus.publish(started)
    finished = CallFinished(definition_name="D")
    bus.publish(finished)

    assert calls == [started, finished]


def test_handlers_may_unsubscribe_while_being_dispatched():
    bus = EventBus()
    received = []

    def once(event):
        received.append(event)
        bus.unsubscribe(CallStarted, once)

    bus.subscribe(CallStarted, once)
    bus.publish(CallStarted())
    bus.publish(CallStarted())

    assert len(received) == 1


def test_event_ids_are_unique():
    assert CallStarted().event_id != CallStarted().event_id


def test_human_readable_subscriber_integration():
    event_bus = EventBus()
    output = io.StringIO()
    messenger.set_renderer(CliRenderer(store=messenger.store, stream=output, min_level="DEBUG"))

    HumanReadableLogSubscriber(event_bus)

    event_bus.publish(RegistryFrozen(definition_name="Adder", parameter_names=["a", "b"]))
    event_bus.publish(CallStarted(definition_name="Adder", call_id="1", params={"a": 5}))
    event_bus.publish(
        CallFinished(
            definition_name="Adder",
            call_id="1",
            status="Succeeded",
            duration=0.01,
            result_preview="5",
        )
    )
    event_bus.publish(
        CallFinished(
            definition_name="Divider",
            call_id="2",
            status="Failed",
            duration=0.02,
            error="ZeroDivisionError: division by zero",
        )
    )

    logs = output.getvalue()
    assert "Adder parameters frozen: a, b" in logs
    assert "{'a': 5}" in logs
    assert "-> 5" in logs
    assert "Divider" in logs and "ZeroDivisionError" in logs


def test_human_readable_subscriber_log_level_filtering():
    event_bus = EventBus()
    output = io.StringIO()
    messenger.set_renderer(CliRenderer(store=messenger.store, stream=output, min_level="ERROR"))

    HumanReadableLogSubscriber(event_bus)

    event_bus.publish(CallStarted(definition_name="D"))  # DEBUG
    event_bus.publish(CallFinished(definition_name="D", status="Succeeded"))  # INFO
    event_bus.publish(CallFinished(definition_name="E", status="Failed", error="Boom"))

    logs = output.getvalue()
    assert "▶️" not in logs
    assert "✅" not in logs
    assert "❌" in logs
    assert "Boom" in logs


def test_detached_subscriber_stops_rendering():
    event_bus = EventBus()
    output = io.StringIO()
    messenger.set_renderer(CliRenderer(store=messenger.store, stream=output, min_level="DEBUG"))

    subscriber = HumanReadableLogSubscriber(event_bus)
    subscriber.detach()
    event_bus.publish(CallFinished(definition_name="D", status="Failed", error="Boom"))

    assert output.getvalue() == ""
