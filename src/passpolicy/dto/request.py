from datetime import datetime
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, SecretStr
from pydantic.alias_generators import to_camel

__all__ = (
    "HashScheme",
    "Plaintext",
    "PreHashed",
    "SecretRepresentation",
    "CredentialChangeRequest",
)

HashScheme = Literal["md5", "scram-sha-256"]

_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")


class Plaintext(BaseModel):
    model_config = _config

    type: Literal["plaintext"] = "plaintext"
    value: SecretStr


class PreHashed(BaseModel):
    """
    A password the client hashed before sending it.

    Only the digest is known, so the policy can do no more than guess at a few
    obviously bad passwords.
    """

    model_config = _config

    type: Literal["prehashed"] = "prehashed"
    scheme: HashScheme
    digest: SecretStr


SecretRepresentation = Annotated[Plaintext | PreHashed, Field(discriminator="type")]


class CredentialChangeRequest(BaseModel):
    model_config = _config

    account_name: str
    secret: SecretRepresentation
    # Passed through by the host, the policy does not look at it.
    valid_until: datetime | None = None
