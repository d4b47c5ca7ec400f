import logging
import signal
import threading
from collections.abc import Mapping
from dataclasses import InitVar, dataclass, field
from types import FrameType
from typing import Any, Callable

from deepdiff import DeepDiff

from .exc import ConfigError
from .policy import PolicyConfiguration

__all__ = ("PolicyState", "install_reload_handler")

logger = logging.getLogger(__name__)

LoaderType = Callable[[], Mapping[str, Any]]


@dataclass(slots=True)
class PolicyState:
    """
    Owns the policy configuration that is currently in force.

    Readers access :attr:`current` without locking. A reload validates the new
    configuration completely before publishing it with a single reference swap, so a
    reader sees either the old or the new threshold set, never a mix of both.
    """

    initial: InitVar[PolicyConfiguration]
    _current: PolicyConfiguration = field(init=False)
    _lock: threading.Lock = field(init=False, default_factory=threading.Lock)

    def __post_init__(self, initial: PolicyConfiguration) -> None:
        self._current = initial

    @property
    def current(self) -> PolicyConfiguration:
        return self._current

    def reload(self, values: Mapping[str, Any]) -> PolicyConfiguration:
        """
        Replaces the active configuration with one built from ``values``.

        Raises:
            ConfigError: The new values are invalid. The previous configuration stays
                in force.
        """
        new = PolicyConfiguration.load(values)

        with self._lock:
            old, self._current = self._current, new

        if diff := DeepDiff(old.as_settings(), new.as_settings(), verbose_level=2):
            logger.info("password policy reloaded: %s", diff.get("values_changed"))
        else:
            logger.debug("password policy reloaded, no changes")
        return new


def install_reload_handler(
    state: PolicyState, loader: LoaderType, signum: int = signal.SIGHUP
) -> None:
    """
    Reloads the policy whenever the process receives ``signum``.

    ``loader`` is called from the signal handler to fetch fresh settings and must
    raise :class:`ConfigError` when they cannot be read. A failed reload is logged and
    the process keeps running with the previous policy.
    """

    def handler(received: int, _: FrameType | None) -> None:
        logger.debug("received signal %d, reloading password policy", received)
        try:
            state.reload(loader())
        except ConfigError as ex:
            logger.error(
                "password policy reload failed, keeping the previous policy: %s", ex
            )

    signal.signal(signum, handler)
