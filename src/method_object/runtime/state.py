import threading
from typing import Any, Dict, List, Mapping

from method_object.runtime.exceptions import TypeMismatch, UnknownParameter
from method_object.spec.parameter import Parameter


class InstanceState:
    """
    Parameter values of one method object instance.

    Only parameters that were explicitly assigned or defaulted have an
    entry. All assignments, and the body of every call, run under `lock`.
    The lock is re-entrant because defaults are assigned through `set`
    while construction already holds it.
    """

    def __init__(self, definition_name: str, parameters: Mapping[str, Parameter]):
        self.definition_name = definition_name
        self.parameters = parameters
        self.lock = threading.RLock()
        self._values: Dict[str, Any] = {}

    def parameter(self, name: str) -> Parameter:
        try:
            return self.parameters[name]
        except KeyError:
            raise UnknownParameter(self.definition_name, name) from None

    def set(self, name: str, value: Any) -> None:
        parameter = self.parameter(name)
        with self.lock:
            try:
                accepted = parameter.acceptable(value)
            except (TypeError, ValueError, AttributeError) as e:
                # A predicate that can't handle the value rejects it.
                raise TypeMismatch(name, parameter.type_name, type(value)) from e
            if not accepted:
                raise TypeMismatch(name, parameter.type_name, type(value))
            self._values[name] = value

    def get(self, name: str) -> Any:
        self.parameter(name)
        return self._values.get(name)

    def has(self, name: str) -> bool:
        self.parameter(name)
        return name in self._values

    def missing(self) -> List[str]:
        """Names without a default and without a value, in registry order."""
        return [
            p.name
            for p in self.parameters.values()
            if not p.has_default and p.name not in self._values
        ]

    def snapshot(self) -> Dict[str, Any]:
        with self.lock:
            return {
                name: self._values[name]
                for name in self.parameters
                if name in self._values
            }
