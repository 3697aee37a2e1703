from .bus import EventBus
from ..messaging.bus import messenger
from .events import CallFinished, CallStarted, RegistryFrozen


class HumanReadableLogSubscriber:
    """
    Listens to runtime events and translates them into semantic messages
    for the messenger. It acts as a bridge between the event domain
    and the user-facing message domain.
    """

    def __init__(self, event_bus: EventBus):
        self._event_bus = event_bus
        self._handlers = [
            (RegistryFrozen, self.on_registry_frozen),
            (CallStarted, self.on_call_started),
            (CallFinished, self.on_call_finished),
        ]
        for event_type, handler in self._handlers:
            event_bus.subscribe(event_type, handler)

    def detach(self):
        for event_type, handler in self._handlers:
            self._event_bus.unsubscribe(event_type, handler)

    def on_registry_frozen(self, event: RegistryFrozen):
        messenger.debug(
            "registry.frozen",
            definition_name=event.definition_name,
            parameter_names=event.parameter_names,
        )

    def on_call_started(self, event: CallStarted):
        messenger.debug(
            "call.started",
            definition_name=event.definition_name,
            call_id=event.call_id,
            params=event.params,
        )

    def on_call_finished(self, event: CallFinished):
        if event.status == "Succeeded":
            messenger.info(
                "call.finished_success",
                definition_name=event.definition_name,
                call_id=event.call_id,
                duration=event.duration,
                result_preview=event.result_preview,
            )
        else:
            messenger.error(
                "call.finished_failure",
                definition_name=event.definition_name,
                call_id=event.call_id,
                duration=event.duration,
                error=event.error,
            )
