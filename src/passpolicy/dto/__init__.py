from .request import (
    CredentialChangeRequest,
    HashScheme,
    Plaintext,
    PreHashed,
    SecretRepresentation,
)
from .verdict import Accepted, Rejected, Rejection, RejectionReason, Verdict

__all__ = (
    "CredentialChangeRequest",
    "HashScheme",
    "Plaintext",
    "PreHashed",
    "SecretRepresentation",
    "Accepted",
    "Rejected",
    "Rejection",
    "RejectionReason",
    "Verdict",
)
