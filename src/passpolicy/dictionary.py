import importlib
import logging
from dataclasses import dataclass, field
from typing import Callable, Protocol

from .exc import DictionaryFeatureError, DictionaryUnavailableError

__all__ = (
    "DictionaryGuard",
    "CracklibDictionaryGuard",
    "build_dictionary_guard",
)

logger = logging.getLogger(__name__)

CheckerType = Callable[..., str]

# FascistCheck reports a broken dictionary the same way it reports a weak password.
LOAD_FAILURE_MESSAGE = "error loading dictionary"


class DictionaryGuard(Protocol):
    def is_weak(self, plaintext: str) -> bool:
        """
        Returns ``True`` if the password is found to be easily cracked.

        Raises:
            DictionaryUnavailableError: The lookup could not be performed.
        """
        ...


def _load_fascist_check() -> CheckerType:
    try:
        module = importlib.import_module("cracklib")
    except ImportError as ex:
        raise DictionaryFeatureError(
            "The dictionary check is enabled but the 'cracklib' package is not "
            "installed. Install passpolicy[cracklib] or disable the check.",
            ctx=None,
        ) from ex
    checker: CheckerType = module.FascistCheck
    return checker


@dataclass(slots=True)
class CracklibDictionaryGuard:
    """
    Looks passwords up with cracklib's ``FascistCheck``.

    Args:
        dictpath: Path prefix of the packed cracklib dictionary. ``None`` uses the
            library default.
        checker: The ``FascistCheck``-compatible callable. Loaded from the
            ``cracklib`` package when omitted.
    """

    dictpath: str | None = None
    checker: CheckerType = field(default_factory=_load_fascist_check)

    def is_weak(self, plaintext: str) -> bool:
        try:
            if self.dictpath is None:
                self.checker(plaintext)
            else:
                self.checker(plaintext, self.dictpath)
        except OSError as ex:
            raise self._unavailable(ex) from ex
        except ValueError as ex:
            reason = str(ex)
            if LOAD_FAILURE_MESSAGE in reason.lower():
                raise self._unavailable(ex) from ex
            logger.debug("cracklib rejected password: %s", reason)
            return True
        return False

    def _unavailable(self, ex: Exception) -> DictionaryUnavailableError:
        return DictionaryUnavailableError(
            "Weak password dictionary {ctx[dictpath]!r} is unavailable: "
            "{ctx[reason]}",
            ctx=DictionaryUnavailableError.Context(
                dictpath=self.dictpath, reason=str(ex)
            ),
        )


def build_dictionary_guard(
    enabled: bool, dictpath: str | None = None
) -> DictionaryGuard | None:
    """Returns the configured dictionary guard, or ``None`` if the check is off."""
    if not enabled:
        logger.debug("dictionary check disabled")
        return None
    guard = CracklibDictionaryGuard(dictpath=dictpath)
    logger.debug("dictionary check enabled, dictpath=%r", dictpath)
    return guard
