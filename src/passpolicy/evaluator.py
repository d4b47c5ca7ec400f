import logging
from dataclasses import dataclass, field

from .analyzer import analyze, as_bytes
from .dictionary import DictionaryGuard
from .dto.request import CredentialChangeRequest, Plaintext, PreHashed
from .dto.verdict import Accepted, Rejected, Rejection, RejectionReason, Verdict
from .guard import contains_username
from .hashing import HashVerifier, PostgresHashVerifier
from .policy import PolicyConfiguration

__all__ = ("PolicyEvaluator", "evaluate")

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class PolicyEvaluator:
    """
    Decides whether a new password is acceptable.

    The evaluator holds no state besides its collaborators; the policy thresholds are
    passed on every call so that a reloaded configuration takes effect on the next
    evaluation.

    Attributes:
        hash_verifier: Used to compare the account name with pre-hashed passwords.
        dictionary_guard: Weak password lookup. ``None`` disables the check.
    """

    hash_verifier: HashVerifier = field(default_factory=PostgresHashVerifier)
    dictionary_guard: DictionaryGuard | None = None

    def evaluate(
        self, config: PolicyConfiguration, request: CredentialChangeRequest
    ) -> Verdict:
        """
        Runs the policy checks in a fixed order and stops at the first violation.

        Pre-hashed passwords only get the user name check. Plaintext passwords are
        checked for length, user name containment, composition (digits, special
        characters, upper case, lower case, in that order) and finally against the
        weak password dictionary.

        Raises:
            DictionaryUnavailableError: The dictionary lookup could not complete.
        """
        secret = request.secret

        if isinstance(secret, PreHashed):
            if contains_username(request.account_name, secret, self.hash_verifier):
                return self._rejected(request, RejectionReason.CONTAINS_USERNAME)
            return Accepted()

        assert isinstance(secret, Plaintext), "Expected %r, got %r" % (
            Plaintext.__name__,
            secret,
        )
        password = secret.value.get_secret_value()

        if len(as_bytes(password)) < config.min_length:
            return self._rejected(
                request, RejectionReason.TOO_SHORT, config.min_length
            )

        if contains_username(request.account_name, secret, self.hash_verifier):
            return self._rejected(request, RejectionReason.CONTAINS_USERNAME)

        counts = analyze(password)
        for actual, minimum, code in (
            (counts.digits, config.min_digits, RejectionReason.INSUFFICIENT_DIGITS),
            (counts.special, config.min_special, RejectionReason.INSUFFICIENT_SPECIAL),
            (counts.upper, config.min_upper, RejectionReason.INSUFFICIENT_UPPER),
            (counts.lower, config.min_lower, RejectionReason.INSUFFICIENT_LOWER),
        ):
            if actual < minimum:
                return self._rejected(request, code, minimum)

        if self.dictionary_guard is not None and self.dictionary_guard.is_weak(
            password
        ):
            return self._rejected(request, RejectionReason.WEAK_SECRET)

        return Accepted()

    @staticmethod
    def _rejected(
        request: CredentialChangeRequest,
        code: RejectionReason,
        threshold: int | None = None,
    ) -> Rejected:
        logger.debug("password for %r rejected: %s", request.account_name, code)
        return Rejected(Rejection(code=code, threshold=threshold))


def evaluate(
    config: PolicyConfiguration,
    request: CredentialChangeRequest,
    *,
    hash_verifier: HashVerifier | None = None,
    dictionary_guard: DictionaryGuard | None = None,
) -> Verdict:
    return PolicyEvaluator(
        hash_verifier=hash_verifier or PostgresHashVerifier(),
        dictionary_guard=dictionary_guard,
    ).evaluate(config, request)
