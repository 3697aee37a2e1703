import inspect
from typing import TYPE_CHECKING, Any, Type

try:
    import typer
except ImportError:
    typer = None

from method_object.config import configure_logging
from method_object.runtime.exceptions import MethodObjectError
from method_object.spec.parameter import Parameter, is_computed
from method_object.spec.predicates import TypePredicate

if TYPE_CHECKING:
    from method_object.core import MethodObject

# Types typer can convert command line strings into.
CLI_TYPES = (str, int, float, bool)

DEFAULT_LOG_LEVEL = "WARNING"
DEFAULT_LOG_FORMAT = "human"

# Parameter names can't start with "_", so these never collide with one.
LOG_LEVEL_ARG = "_log_level"
LOG_FORMAT_ARG = "_log_format"


def _annotation_for(parameter: Parameter) -> type:
    predicate = parameter.predicate
    if isinstance(predicate, TypePredicate) and len(predicate.types) == 1:
        if predicate.types[0] in CLI_TYPES:
            return predicate.types[0]
    # Everything else reaches the definition as a string and is checked there.
    return str


def _option_for(parameter: Parameter, annotation: type) -> Any:
    flag = f"--{parameter.name}"
    if annotation is bool:
        flag = f"--{parameter.name}/--no-{parameter.name}"

    if not parameter.has_default:
        # Not required on the command line: a missing value is reported by
        # the definition as MissingArguments, like any other call error.
        default = None
    elif not is_computed(parameter.default) and isinstance(parameter.default, annotation):
        default = parameter.default
    else:
        # Left unset so the definition resolves its own default.
        default = None

    return typer.Option(default, flag, help=f"{parameter.name} ({parameter.type_name})")


def create_cli(definition: "Type[MethodObject]") -> "typer.Typer":
    """
    Builds a typer application that calls `definition` with one command
    line option per parameter and prints the result.
    """
    if typer is None:
        raise ImportError(
            "The 'typer' library is required to use the cli tool. "
            "Please install it with: pip install method-object[cli]"
        )

    app = typer.Typer()

    def main(**kwargs):
        log_level = kwargs.pop(LOG_LEVEL_ARG, DEFAULT_LOG_LEVEL)
        log_format = kwargs.pop(LOG_FORMAT_ARG, DEFAULT_LOG_FORMAT)
        configure_logging(log_level=log_level, log_format=log_format)

        # Filter out None values so they don't override the definition's defaults
        values = {k: v for k, v in kwargs.items() if v is not None}
        try:
            result = definition.call(values)
        except MethodObjectError as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(code=1)
        if result is not None:
            typer.echo(result)

    # --- Metaprogramming to create the dynamic signature ---
    sig_params = [
        inspect.Parameter(
            name=LOG_LEVEL_ARG,
            kind=inspect.Parameter.KEYWORD_ONLY,
            default=typer.Option(
                DEFAULT_LOG_LEVEL,
                "--log-level",
                help="Minimum level for console logging (DEBUG, INFO, WARNING, ERROR).",
            ),
            annotation=str,
        ),
        inspect.Parameter(
            name=LOG_FORMAT_ARG,
            kind=inspect.Parameter.KEYWORD_ONLY,
            default=typer.Option(
                DEFAULT_LOG_FORMAT,
                "--log-format",
                help="Format for logging ('human' or 'json').",
            ),
            annotation=str,
        ),
    ]

    for parameter in definition.parameters():
        annotation = _annotation_for(parameter)
        sig_params.append(
            inspect.Parameter(
                name=parameter.name,
                kind=inspect.Parameter.KEYWORD_ONLY,
                default=_option_for(parameter, annotation),
                annotation=annotation,
            )
        )

    main.__signature__ = inspect.Signature(parameters=sig_params)
    main.__doc__ = definition.__doc__ or f"Calls {definition.__qualname__}."

    app.command()(main)

    return app
