import time
from typing import TYPE_CHECKING, Any, Callable, Optional
from uuid import uuid4

from .bus import EventBus
from .events import CallFinished, CallStarted
from .exceptions import BodyNotImplemented, MissingArguments

if TYPE_CHECKING:
    from method_object.core import MethodObject

# Name under which every definition's body is reachable.
BODY_ATTRIBUTE = "perform"


def find_body(definition: type) -> Optional[Callable[..., Any]]:
    return getattr(definition, BODY_ATTRIBUTE, None)


def _preview(result: Any, limit: int = 100) -> str:
    text = repr(result)
    if len(text) > limit:
        return text[: limit - 3] + "..."
    return text


def invoke(instance: "MethodObject", bus: EventBus) -> Any:
    """
    Runs the body of `instance` with the parameters currently set.

    Concurrent invocations of the same instance are serialized on its
    lock; different instances never contend.
    """
    definition = type(instance)
    name = definition.__qualname__
    state = instance._state

    with state.lock:
        if find_body(definition) is None:
            raise BodyNotImplemented(name)

        missing = state.missing()
        if missing:
            raise MissingArguments(missing, definition_name=name)

        call_id = str(uuid4())
        bus.publish(
            CallStarted(definition_name=name, call_id=call_id, params=state.snapshot())
        )
        start_time = time.time()
        try:
            result = getattr(instance, BODY_ATTRIBUTE)()
        except Exception as e:
            bus.publish(
                CallFinished(
                    definition_name=name,
                    call_id=call_id,
                    status="Failed",
                    duration=time.time() - start_time,
                    error=f"{type(e).__name__}: {e}",
                )
            )
            raise

        bus.publish(
            CallFinished(
                definition_name=name,
                call_id=call_id,
                status="Succeeded",
                duration=time.time() - start_time,
                result_preview=_preview(result),
            )
        )
        return result
