from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
import time
import itertools

# Fast, thread-safe counter for event IDs
_event_id_gen = itertools.count()


@dataclass(frozen=True)
class Event:
    event_id: str = field(default_factory=lambda: str(next(_event_id_gen)))
    timestamp: float = field(default_factory=time.time)


@dataclass(frozen=True)
class DefinitionEvent(Event):
    definition_name: str = ""


@dataclass(frozen=True)
class RegistryFrozen(DefinitionEvent):
    parameter_names: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class CallEvent(DefinitionEvent):
    call_id: str = ""


@dataclass(frozen=True)
class CallStarted(CallEvent):
    params: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class CallFinished(CallEvent):
    status: str = "Unknown"  # "Succeeded", "Failed"
    duration: float = 0.0
    result_preview: Optional[str] = None
    error: Optional[str] = None
