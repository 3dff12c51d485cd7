from __future__ import annotations

from typing import Any, Optional, Sequence, Tuple


def _rebuild_error(cls: type, args: tuple, state: dict[str, Any]) -> ConfigError:
    error = cls.__new__(cls, *args)
    error.__dict__.update(state)
    return error


class ConfigError(Exception):
    """Base class for every failure raised while resolving configuration."""

    def __init__(self, message: str, *, source: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.source = source

    def __str__(self) -> str:
        if self.source:
            return f"{self.message} (source: {self.source})"
        return self.message

    def __reduce__(self):
        # Subclass constructors take extra arguments that are not in self.args.
        return _rebuild_error, (type(self), self.args, self.__dict__.copy())


class EnvironmentResolutionError(ConfigError):
    """The working directory used to locate configuration files cannot be determined."""


class UnsupportedEnvironmentError(ConfigError):
    def __init__(self, environment: str, allowed: Sequence[str] = (), *, reason: Optional[str] = None) -> None:
        if reason is not None:
            message = f"{environment!r} is not a valid environment name: {reason}."
        else:
            choices = ", ".join(f"`{name}`" for name in allowed)
            message = f"{environment} is not a supported environment. Use one of {choices}."
        super().__init__(message)
        self.environment = environment
        self.allowed = tuple(allowed)


class SourceNotFoundError(ConfigError):
    """A required configuration file does not exist."""


class ParseError(ConfigError):
    """
    A configuration source exists but its contents cannot be used.

    `line` and `column` are 1-based and only set when the backend reports a position.
    """

    def __init__(
        self,
        message: str,
        *,
        source: Optional[str] = None,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ) -> None:
        if line is not None:
            message = f"{message} at line {line}" + (f", column {column}" if column is not None else "")
        super().__init__(message, source=source)
        self.line = line
        self.column = column


class DecodeError(ConfigError):
    """The merged tree does not fit the requested settings type."""

    def __init__(
        self,
        message: str,
        *,
        field_path: str,
        errors: Sequence[Tuple[str, str]] = (),
    ) -> None:
        super().__init__(message)
        self.field_path = field_path
        self.errors = tuple(errors)
