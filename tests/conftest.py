import pytest
from method_object.runtime.bus import EventBus
from method_object.messaging.bus import messenger
from method_object.testing import SpySubscriber
from method_object import config


@pytest.fixture
def bus_and_spy():
    """Provides an EventBus instance and an attached SpySubscriber."""
    bus = EventBus()
    spy = SpySubscriber(bus)
    return bus, spy


@pytest.fixture(autouse=True)
def reset_messenger():
    """Keeps renderers installed by one test from leaking into the next."""
    renderer = messenger.renderer
    yield
    messenger.set_renderer(renderer)
    if config._active_subscriber is not None:
        config._active_subscriber.detach()
        config._active_subscriber = None
