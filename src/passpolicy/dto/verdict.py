import enum
from dataclasses import dataclass
from typing import Literal, TypeAlias

__all__ = ("RejectionReason", "Rejection", "Accepted", "Rejected", "Verdict")


class RejectionReason(enum.StrEnum):
    TOO_SHORT = "too_short"
    CONTAINS_USERNAME = "contains_username"
    INSUFFICIENT_DIGITS = "insufficient_digits"
    INSUFFICIENT_SPECIAL = "insufficient_special"
    INSUFFICIENT_UPPER = "insufficient_upper"
    INSUFFICIENT_LOWER = "insufficient_lower"
    WEAK_SECRET = "weak_secret"
    DICTIONARY_UNAVAILABLE = "dictionary_unavailable"


MESSAGES: dict[RejectionReason, str] = {
    RejectionReason.TOO_SHORT: "password is too short, it must be at least {threshold} "
    "characters long",
    RejectionReason.CONTAINS_USERNAME: "password must not contain user name",
    RejectionReason.INSUFFICIENT_DIGITS: "password must contain at least {threshold} "
    "numeric characters",
    RejectionReason.INSUFFICIENT_SPECIAL: "password must contain at least {threshold} "
    "special characters",
    RejectionReason.INSUFFICIENT_UPPER: "password must contain at least {threshold} "
    "upper case letters",
    RejectionReason.INSUFFICIENT_LOWER: "password must contain at least {threshold} "
    "lower case letters",
    RejectionReason.WEAK_SECRET: "password is easily cracked",
    RejectionReason.DICTIONARY_UNAVAILABLE: "password could not be checked against "
    "the dictionary of weak passwords",
}


@dataclass(slots=True, frozen=True)
class Rejection:
    """
    Attributes:
        code: Which rule the password broke.
        threshold: The configured minimum that was not met, if the rule has one.
    """

    code: RejectionReason
    threshold: int | None = None

    @property
    def message(self) -> str:
        return MESSAGES[self.code].format(threshold=self.threshold)


@dataclass(slots=True, frozen=True)
class Accepted:
    status: Literal["accepted"] = "accepted"

    @property
    def accepted(self) -> bool:
        return True


@dataclass(slots=True, frozen=True)
class Rejected:
    reason: Rejection
    status: Literal["rejected"] = "rejected"

    @property
    def accepted(self) -> bool:
        return False


Verdict: TypeAlias = Accepted | Rejected
