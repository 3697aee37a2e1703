from typing import Iterable, List, Optional


class MethodObjectError(Exception):
    """Base class for all errors raised by method objects."""

    pass


class InvalidDeclaration(MethodObjectError, ValueError):
    """Raised when a parameter or body declaration is malformed."""

    pass


class FrozenRegistry(MethodObjectError, RuntimeError):
    """
    Raised when a parameter is declared on a definition that has already
    been instantiated. Registries freeze on first use and never thaw.
    """

    def __init__(self, definition_name: str, parameter_name: str):
        self.definition_name = definition_name
        self.parameter_name = parameter_name
        super().__init__(
            f"Cannot declare parameter '{parameter_name}' on '{definition_name}': "
            "the definition has already been instantiated."
        )


class UnknownParameter(MethodObjectError, TypeError):
    def __init__(self, definition_name: str, parameter_name: str):
        self.definition_name = definition_name
        self.parameter_name = parameter_name
        super().__init__(
            f"'{definition_name}' has no parameter named '{parameter_name}'"
        )


class TypeMismatch(MethodObjectError, TypeError):
    def __init__(self, parameter_name: str, expected: str, received: type):
        self.parameter_name = parameter_name
        self.expected = expected
        self.received = received
        super().__init__(
            f"Expected a {expected} for {parameter_name}, "
            f"{received.__name__} received"
        )


class MissingArguments(MethodObjectError, TypeError):
    """
    Raised when a method object is called while one or more parameters
    without a default have no value.
    """

    def __init__(self, missing: Iterable[str], definition_name: Optional[str] = None):
        self.missing: List[str] = list(missing)
        self.definition_name = definition_name
        super().__init__(f"Missing required arguments: {', '.join(self.missing)}")


class BodyNotImplemented(MethodObjectError, NotImplementedError):
    def __init__(self, definition_name: str):
        self.definition_name = definition_name
        super().__init__(
            f"Implementation missing for '{definition_name}'. "
            "Please use `@called` to define the method body."
        )
