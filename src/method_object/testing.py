from typing import List, Type

from method_object.runtime.bus import EventBus
from method_object.runtime.events import Event


class SpySubscriber:
    """A test utility to collect events from an EventBus."""

    def __init__(self, bus: EventBus):
        self.events: List[Event] = []
        bus.subscribe(Event, self.collect)

    def collect(self, event: Event):
        self.events.append(event)

    def events_of_type(self, event_type: Type[Event]) -> List[Event]:
        """Returns a list of all events of a specific type."""
        return [e for e in self.events if isinstance(e, event_type)]

    def event_names(self) -> List[str]:
        return [type(e).__name__ for e in self.events]
