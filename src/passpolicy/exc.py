from dataclasses import dataclass
from typing import TYPE_CHECKING, TypedDict

from typing_extensions import override

if TYPE_CHECKING:
    from .dto.verdict import Rejection

__all__ = (
    "ApplicationError",
    "ConfigError",
    "OutOfRangeError",
    "InconsistentThresholdsError",
    "ConfigSourceError",
    "DictionaryFeatureError",
    "DictionaryUnavailableError",
    "UnsupportedHashSchemeError",
    "PasswordRejectedError",
)


@dataclass(slots=True)
class ApplicationError(Exception):
    class Context(TypedDict): ...

    message: str
    ctx: Context | None

    def format_message(self) -> str:
        return self.message.format(ctx=self.ctx or {})

    @override
    def __str__(self) -> str:
        return self.format_message()


@dataclass(slots=True)
class ConfigError(ApplicationError):
    """
    Raised when a policy configuration cannot be activated.

    Configuration errors are only ever raised at load or reload time. A policy that
    failed to load never evaluates a single password.
    """


@dataclass(slots=True)
class OutOfRangeError(ConfigError):
    """Raised when one or more thresholds are not integers in ``[1, INT_MAX]``."""

    class Context(TypedDict):
        """
        Attributes:
            settings: Names of the offending settings.
            errors: Human-readable validation errors, one per offending setting.
        """

        settings: tuple[str, ...]
        errors: list[str]

    ctx: Context

    @override
    def format_message(self) -> str:
        return "%s\n\n%s" % (
            self.message.format(ctx=self.ctx),
            "\n".join(self.ctx["errors"]),
        )


@dataclass(slots=True)
class InconsistentThresholdsError(ConfigError):
    """
    Raised when the per-class minimums add up to more than the minimum length.

    Such a policy could never accept any password, so it is refused outright rather
    than clamped.
    """

    class Context(TypedDict):
        """
        Attributes:
            total: Sum of the digit, special, upper case and lower case minimums.
            min_length: The configured minimum password length.
        """

        total: int
        min_length: int

    ctx: Context


@dataclass(slots=True)
class ConfigSourceError(ConfigError):
    """Raised when the settings a policy is loaded from cannot be read."""

    class Context(TypedDict):
        reason: str

    ctx: Context


@dataclass(slots=True)
class DictionaryFeatureError(ConfigError):
    """Raised when the dictionary check is enabled but cannot be set up."""


@dataclass(slots=True)
class DictionaryUnavailableError(ApplicationError):
    """
    Raised when the weak-password dictionary lookup could not complete.

    This is neither an accept nor a reject. Whoever hosts the policy decides whether
    to fail open or closed.
    """

    class Context(TypedDict):
        dictpath: str | None
        reason: str

    ctx: Context


@dataclass(slots=True)
class UnsupportedHashSchemeError(ApplicationError):
    class Context(TypedDict):
        scheme: str

    ctx: Context


@dataclass(slots=True)
class PasswordRejectedError(ApplicationError):
    """Raised by the password check hook to abort a password change."""

    class Context(TypedDict):
        rejection: "Rejection"

    ctx: Context

    @override
    def format_message(self) -> str:
        return self.ctx["rejection"].message
