from typing import Optional, TextIO

from method_object.messaging.bus import messenger
from method_object.messaging.renderer import CliRenderer, JsonRenderer
from method_object.runtime.bus import EventBus, event_bus as default_event_bus
from method_object.runtime.subscribers import HumanReadableLogSubscriber

LOG_FORMATS = ("human", "json")

_active_subscriber: Optional[HumanReadableLogSubscriber] = None


def configure_logging(
    log_level: str = "INFO",
    log_format: str = "human",
    stream: Optional[TextIO] = None,
    event_bus: Optional[EventBus] = None,
) -> HumanReadableLogSubscriber:
    """
    Routes method object events to a console renderer.

    Calling it again replaces the previous configuration instead of
    stacking a second subscriber on top of it.
    """
    global _active_subscriber

    if log_format == "json":
        renderer = JsonRenderer(stream=stream, min_level=log_level)
    elif log_format == "human":
        renderer = CliRenderer(
            store=messenger.store, stream=stream, min_level=log_level
        )
    else:
        raise ValueError(
            f"Unsupported log format: {log_format!r}. Expected one of {LOG_FORMATS}"
        )
    messenger.set_renderer(renderer)

    if _active_subscriber is not None:
        _active_subscriber.detach()
    _active_subscriber = HumanReadableLogSubscriber(event_bus or default_event_bus)
    return _active_subscriber
