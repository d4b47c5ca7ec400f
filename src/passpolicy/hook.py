import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal, Self

from ._conf import DictionaryFailureMode, Settings
from .dictionary import build_dictionary_guard
from .dto.request import CredentialChangeRequest, Plaintext, PreHashed
from .dto.verdict import Accepted, Rejected, Rejection, RejectionReason, Verdict
from .evaluator import PolicyEvaluator
from .exc import DictionaryUnavailableError, PasswordRejectedError
from .policy import PolicyConfiguration
from .state import PolicyState

__all__ = ("PasswordType", "PasswordCheckHook")

logger = logging.getLogger(__name__)

PasswordType = Literal["plaintext", "md5", "scram-sha-256"]


@dataclass(slots=True)
class PasswordCheckHook:
    """
    Entry point for hosts that check passwords on account creation or change.

    The hook evaluates the password against whatever policy ``state`` holds at call
    time. An accepted password returns ``None``; a rejected one raises
    :class:`PasswordRejectedError` whose message is meant for the user.

    Attributes:
        dictionary_failure: What to do when the weak password dictionary cannot be
            consulted. ``"error"`` propagates :class:`DictionaryUnavailableError`,
            ``"open"`` accepts the password, ``"closed"`` rejects it.
    """

    state: PolicyState
    evaluator: PolicyEvaluator = field(default_factory=PolicyEvaluator)
    dictionary_failure: DictionaryFailureMode = "error"

    @classmethod
    def from_settings(cls, settings: Settings) -> Self:
        """
        Raises:
            ConfigError: The policy thresholds are invalid, or the dictionary check is
                enabled but cannot be set up.
        """
        return cls(
            state=PolicyState(PolicyConfiguration.load(settings.policy)),
            evaluator=PolicyEvaluator(
                dictionary_guard=build_dictionary_guard(
                    settings.dictionary_enabled, settings.dictionary_path
                )
            ),
            dictionary_failure=settings.dictionary_failure_mode,
        )

    def check(
        self,
        account_name: str,
        password: str,
        password_type: PasswordType = "plaintext",
        valid_until: datetime | None = None,
    ) -> Verdict:
        if password_type == "plaintext":
            secret: Plaintext | PreHashed = Plaintext(value=password)
        else:
            secret = PreHashed(scheme=password_type, digest=password)

        request = CredentialChangeRequest(
            account_name=account_name, secret=secret, valid_until=valid_until
        )

        try:
            return self.evaluator.evaluate(self.state.current, request)
        except DictionaryUnavailableError as ex:
            match self.dictionary_failure:
                case "open":
                    logger.warning("%s, accepting password without the check", ex)
                    return Accepted()
                case "closed":
                    logger.warning("%s, rejecting password", ex)
                    return Rejected(
                        Rejection(code=RejectionReason.DICTIONARY_UNAVAILABLE)
                    )
                case _:
                    raise

    def __call__(
        self,
        account_name: str,
        password: str,
        password_type: PasswordType = "plaintext",
        valid_until: datetime | None = None,
    ) -> None:
        verdict = self.check(account_name, password, password_type, valid_until)
        if isinstance(verdict, Rejected):
            raise PasswordRejectedError(
                verdict.reason.message,
                ctx=PasswordRejectedError.Context(rejection=verdict.reason),
            )
