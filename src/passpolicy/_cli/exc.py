import pathlib
from dataclasses import dataclass
from typing import TypedDict

import click
from typing_extensions import override

__all__ = (
    "EXIT_REJECTED",
    "CLIError",
    "ConfigError",
    "ConfigReadError",
    "ConfigSyntaxError",
    "ConfigValidationError",
    "PasswordRejected",
)

EXIT_REJECTED = 65


@dataclass(slots=True)
class CLIError(click.ClickException):
    """
    An error reported to the operator as a one-line message.

    `exit_code` is the process exit status. Errors exit with 1, usage errors with 2
    (click), and rejected passwords with `EXIT_REJECTED`, picked from the
    user-defined range 64 - 113 of https://tldp.org/LDP/abs/html/exitcodes.html.
    """

    message: str
    exit_code: int = 1

    def __post_init__(self) -> None:
        click.ClickException.__init__(self, self.message)


@dataclass(slots=True)
class ConfigError(CLIError):
    pass


@dataclass(slots=True, kw_only=True)
class ConfigReadError(ConfigError):
    class Context(TypedDict):
        filename: pathlib.Path

    ctx: Context

    @override
    def format_message(self) -> str:
        return "Failed to read configuration file %r: %s" % (
            str(self.ctx["filename"]),
            self.message,
        )


@dataclass(slots=True, kw_only=True)
class ConfigSyntaxError(ConfigError):
    class Context(TypedDict):
        filename: pathlib.Path

    ctx: Context

    @override
    def format_message(self) -> str:
        return "Decoding failed for configuration file %r.\n\n%s" % (
            str(self.ctx["filename"]),
            self.message,
        )


@dataclass(slots=True, kw_only=True)
class ConfigValidationError(ConfigError):
    @override
    def format_message(self) -> str:
        return "Invalid configuration input.\n\n%s" % self.message


@dataclass(slots=True)
class PasswordRejected(CLIError):
    exit_code: int = EXIT_REJECTED

    @override
    def format_message(self) -> str:
        return "Password rejected: %s" % self.message
