"""
The MethodObject base class.

A method object turns a method's local state into a first-class object:
named, typed, defaultable parameters bound to a single body. Subclass
MethodObject, declare parameters with `param(...)` and mark the body with
`@called`:

    class ComplexCalculation(MethodObject):
        start_number = param(int)
        end_number = param(int, default=2)

        @called
        def compute(self):
            self.magic_number = 42
            return self.start_number + self.end_number + self.magic_number

    ComplexCalculation.call(start_number=1, end_number=3)  # 46
    ComplexCalculation.call(start_number=1)                # 45
    ComplexCalculation.call(end_number=3)                  # MissingArguments

    calculation = ComplexCalculation(end_number=3)
    calculation.start_number = 1
    calculation.call()  # 46

Parameters and bodies are inherited. A subclass may re-declare a parameter
to change its type or default, and may override the body while still
reaching the parent's with `super().perform()`.
"""

import types
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from method_object.runtime.bus import EventBus, event_bus as default_event_bus
from method_object.runtime.engine import BODY_ATTRIBUTE, invoke
from method_object.runtime.events import RegistryFrozen
from method_object.runtime.exceptions import InvalidDeclaration
from method_object.runtime.state import InstanceState
from method_object.spec.parameter import Parameter, ParameterDeclaration
from method_object.spec.predicates import ANYTHING
from method_object.spec.registry import ParameterRegistry

_BODY_MARKER = "__method_object_body__"


def called(body: Optional[Callable[..., Any]] = None) -> Callable[..., Any]:
    """
    Marks a method as the body of its MethodObject. The body takes no
    arguments besides `self` and is also reachable as `perform`.
    """
    if body is None or not callable(body):
        raise InvalidDeclaration("`called` requires a body function")
    setattr(body, _BODY_MARKER, True)
    return body


class dualmethod:
    """
    A method with one implementation for the class and another for its
    instances, selected by how it is accessed:

        @dualmethod
        def call(self): ...

        @call.classmethod
        def call(cls, **values): ...
    """

    def __init__(self, instance_func: Callable[..., Any]):
        self.instance_func = instance_func
        self.class_func: Optional[Callable[..., Any]] = None
        self.__doc__ = instance_func.__doc__

    def classmethod(self, class_func: Callable[..., Any]) -> "dualmethod":
        self.class_func = class_func
        return self

    def __get__(self, instance, owner):
        if instance is None:
            return types.MethodType(self.class_func, owner)
        return types.MethodType(self.instance_func, instance)


class ParameterAccessor:
    """Attribute access for one parameter, routed through validated get/set."""

    def __init__(self, name: str):
        self.name = name

    def __get__(self, instance, owner):
        if instance is None:
            return owner._registry.get(self.name)
        return instance._state.get(self.name)

    def __set__(self, instance, value):
        instance._state.set(self.name, value)


def _merge_arguments(
    values: Optional[Mapping[str, Any]], named: Dict[str, Any]
) -> Dict[str, Any]:
    arguments = dict(values or {})
    for name in named:
        if name in arguments:
            raise TypeError(f"got multiple values for parameter '{name}'")
    arguments.update(named)
    return arguments


class MethodObject:
    _registry: ParameterRegistry = ParameterRegistry("MethodObject")
    _event_bus: EventBus = default_event_bus

    def __init_subclass__(cls, event_bus: Optional[EventBus] = None, **kwargs):
        super().__init_subclass__(**kwargs)
        # `cls._registry` still resolves to the parent's registry here.
        cls._registry = ParameterRegistry(cls.__qualname__, parent=cls._registry)
        if event_bus is not None:
            cls._event_bus = event_bus

        for name, value in list(cls.__dict__.items()):
            if isinstance(value, ParameterDeclaration):
                cls._declare(value.bind(name))

        bodies = [
            value
            for value in cls.__dict__.values()
            if callable(value) and getattr(value, _BODY_MARKER, False) is True
        ]
        if len(bodies) > 1:
            names = ", ".join(b.__name__ for b in bodies)
            raise InvalidDeclaration(
                f"'{cls.__qualname__}' declares more than one body: {names}"
            )
        if bodies:
            own_perform = cls.__dict__.get(BODY_ATTRIBUTE)
            if own_perform is not None and own_perform is not bodies[0]:
                raise InvalidDeclaration(
                    f"'{cls.__qualname__}' defines both `{BODY_ATTRIBUTE}` "
                    f"and a `@called` body"
                )
            setattr(cls, BODY_ATTRIBUTE, bodies[0])

    # --- Declaration surface ---

    @classmethod
    def declare_parameter(
        cls, name: str, type: Any = ANYTHING, **options: Any
    ) -> Parameter:
        """
        Declares (or re-declares) a parameter after the class statement.
        Fails with FrozenRegistry once the definition has been instantiated.
        """
        parameter = Parameter.declare(name, type, **options)
        cls._declare(parameter)
        return parameter

    @classmethod
    def _declare(cls, parameter: Parameter) -> None:
        if parameter.name == BODY_ATTRIBUTE or hasattr(MethodObject, parameter.name):
            raise InvalidDeclaration(
                f"Parameter name '{parameter.name}' shadows a MethodObject attribute"
            )
        cls._registry.declare(parameter)
        setattr(cls, parameter.name, ParameterAccessor(parameter.name))

    @classmethod
    def declare_body(cls, body: Optional[Callable[..., Any]] = None):
        if body is None or not callable(body):
            raise InvalidDeclaration("`declare_body` requires a body function")
        setattr(cls, BODY_ATTRIBUTE, body)
        return body

    @classmethod
    def parameters(cls) -> Tuple[Parameter, ...]:
        return tuple(cls._registry.effective().values())

    # --- Instance lifecycle ---

    def __init__(self, values: Optional[Mapping[str, Any]] = None, /, **named: Any):
        definition = type(self)
        arguments = _merge_arguments(values, named)

        registry = definition._registry
        if registry.freeze():
            definition._event_bus.publish(
                RegistryFrozen(
                    definition_name=definition.__qualname__,
                    parameter_names=list(registry.effective()),
                )
            )

        self._state = InstanceState(definition.__qualname__, registry.effective())
        with self._state.lock:
            for name, value in arguments.items():
                self._state.set(name, value)

            # Defaults are resolved once; later reads see the stored value.
            for parameter in self._state.parameters.values():
                if parameter.name not in arguments and parameter.has_default:
                    self._state.set(parameter.name, parameter.resolve_default(self))

    def get(self, name: str) -> Any:
        return self._state.get(name)

    def set(self, name: str, value: Any) -> None:
        self._state.set(name, value)

    def is_set(self, name: str) -> bool:
        return self._state.has(name)

    def snapshot(self) -> Dict[str, Any]:
        """Returns the parameters currently set, in declaration order."""
        return self._state.snapshot()

    # --- Invocation ---

    @dualmethod
    def call(self) -> Any:
        """
        Calls the method object with the parameters currently set.

        Raises:
            BodyNotImplemented: if no body was declared.
            MissingArguments: if a parameter without a default has no value.
        """
        return invoke(self, type(self)._event_bus)

    @call.classmethod
    def call(cls, values: Optional[Mapping[str, Any]] = None, /, **named: Any) -> Any:
        return cls(values, **named).call()

    @dualmethod
    def as_callable(self) -> Callable[[], Any]:
        def handle():
            return self.call()

        return handle

    @as_callable.classmethod
    def as_callable(cls) -> Callable[..., Any]:
        def handle(values: Optional[Mapping[str, Any]] = None, /, **named: Any):
            return cls.call(values, **named)

        handle.__name__ = cls.__name__
        handle.__doc__ = cls.__doc__
        return handle

    def __call__(self) -> Any:
        return self.call()

    def __repr__(self):
        values = " ".join(f"{k}={v!r}" for k, v in self.snapshot().items())
        return f"<{type(self).__qualname__} {values}>" if values else f"<{type(self).__qualname__}>"
