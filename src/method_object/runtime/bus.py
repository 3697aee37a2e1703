import threading
from typing import Callable, Dict, List, Type

from .events import Event

EventHandler = Callable[[Event], None]


class EventBus:
    """
    Delivers the runtime events of method objects to subscribers.

    A handler subscribed to an event class also receives its subclasses:
    subscribing to `Event` observes everything, subscribing to `CallEvent`
    observes both ends of every call. Calls may publish from many threads
    at once, so the subscription table is guarded by a lock; handlers run
    outside of it, in the publishing thread.
    """

    def __init__(self):
        self._handlers: Dict[Type[Event], List[EventHandler]] = {}
        self._lock = threading.Lock()

    def subscribe(self, event_type: Type[Event], handler: EventHandler) -> None:
        with self._lock:
            self._handlers.setdefault(event_type, []).append(handler)

    def unsubscribe(self, event_type: Type[Event], handler: EventHandler) -> None:
        """Removes a handler. Handlers that were never subscribed are ignored."""
        with self._lock:
            handlers = self._handlers.get(event_type, [])
            if handler in handlers:
                handlers.remove(handler)

    def publish(self, event: Event) -> None:
        with self._lock:
            targets = [
                handler
                for event_class in type(event).__mro__
                for handler in self._handlers.get(event_class, ())
            ]
        for handler in targets:
            handler(event)


# Bus used by every definition that doesn't bring its own.
event_bus = EventBus()
