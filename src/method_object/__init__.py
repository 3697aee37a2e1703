from typing import Any

from .spec.predicates import ANYTHING, Predicate
from .spec.parameter import Parameter, param
from .spec.registry import ParameterRegistry
from .core import MethodObject, called
from .runtime.bus import EventBus, event_bus
from .runtime.exceptions import (
    MethodObjectError,
    InvalidDeclaration,
    FrozenRegistry,
    UnknownParameter,
    TypeMismatch,
    MissingArguments,
    BodyNotImplemented,
)
from .config import configure_logging

__version__ = "0.3.0"

__all__ = [
    "MethodObject",
    "param",
    "called",
    "ANYTHING",
    "Predicate",
    "Parameter",
    "ParameterRegistry",
    "EventBus",
    "event_bus",
    "configure_logging",
    "cli",
    "MethodObjectError",
    "InvalidDeclaration",
    "FrozenRegistry",
    "UnknownParameter",
    "TypeMismatch",
    "MissingArguments",
    "BodyNotImplemented",
]


def cli(definition: Any) -> Any:
    """Builds a typer CLI for a MethodObject definition."""
    from .tools.cli import create_cli

    return create_cli(definition)
