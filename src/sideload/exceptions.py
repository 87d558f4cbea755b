import typing


class SideloadException(Exception):
    message: str

    def __str__(self) -> str:
        return self.message


class ConfigurationError(SideloadException):
    """
    Raised when a representer or the engine itself is set up incorrectly.
    These errors are meant for the developer, not for the API caller.
    """

    message: str

    def __init__(self, message: str):
        self.message = message


class InvalidDeclarationError(ConfigurationError):
    pass


class AccessorNotFoundError(ConfigurationError):
    reflection: "reflection.Reflection"
    native: typing.Any

    @property
    def message(self):
        return (
            f"association ({self.reflection.name}) of {self.reflection.source_name} cannot be "
            f"read from {type(self.native).__name__}: no accessor {self.reflection.accessor!r}"
        )

    def __init__(self, reflection: "reflection.Reflection", native: typing.Any):
        self.reflection = reflection
        self.native = native


class RepresenterNotFoundError(ConfigurationError):
    key: typing.Union[str, type]

    @property
    def message(self):
        if isinstance(self.key, type):
            return f"no representer registered for {self.key.__module__}.{self.key.__qualname__}"
        else:
            return f'no representer known as "{self.key}"'

    def __init__(self, key: typing.Union[str, type]):
        self.key = key


class IdentityNotFoundError(ConfigurationError):
    native: typing.Any
    attr: str

    @property
    def message(self):
        return f"{type(self.native).__name__} has no identifier attribute {self.attr!r}"

    def __init__(self, native: typing.Any, attr: str):
        self.native = native
        self.attr = attr


class ConditionEvaluationError(SideloadException):
    reflection: "reflection.Reflection"
    condition: typing.Callable

    @property
    def message(self):
        return (
            f"condition {getattr(self.condition, '__qualname__', self.condition)!r} "
            f"of association ({self.reflection.name}) failed ({self.__cause__!s})"
        )

    def __init__(self, reflection: "reflection.Reflection", condition: typing.Callable):
        self.reflection = reflection
        self.condition = condition


class RenderError(SideloadException):
    reflection: "reflection.Reflection"
    native: typing.Any

    @property
    def message(self):
        return (
            f"rendering {type(self.native).__name__} for association ({self.reflection.name}) "
            f"of {self.reflection.source_name} failed ({self.__cause__!s})"
        )

    def __init__(self, reflection: "reflection.Reflection", native: typing.Any):
        self.reflection = reflection
        self.native = native


class InvalidUserOptionsError(SideloadException):
    parameter: str
    value: typing.Any
    detail: typing.Optional[str]

    @property
    def message(self):
        return (
            f"parameter ({self.parameter}) contains an invalid value"
            f'{" (" + self.detail + ")" if self.detail is not None else ""}: {self.value!r}'
        )

    def __init__(self, parameter: str, value: typing.Any, detail: typing.Optional[str] = None):
        self.parameter = parameter
        self.value = value
        self.detail = detail


if typing.TYPE_CHECKING:
    from . import reflection  # noqa: E402
