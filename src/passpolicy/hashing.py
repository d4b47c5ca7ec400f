import base64
import hashlib
import hmac
import logging
from dataclasses import dataclass
from typing import Protocol

from passlib.hash import postgres_md5
from passlib.utils import saslprep

from .dto.request import HashScheme
from .exc import UnsupportedHashSchemeError

__all__ = ("HashVerifier", "PostgresHashVerifier")

logger = logging.getLogger(__name__)

SCRAM_METHOD = "SCRAM-SHA-256"

# The server default is 4096.
MAX_SCRAM_ITERATIONS = 1_000_000


class HashVerifier(Protocol):
    def verify(
        self, scheme: HashScheme, digest: str, candidate: str, *, account_name: str
    ) -> bool:
        """Returns ``True`` if ``candidate`` hashes to ``digest`` under ``scheme``."""
        ...


@dataclass(slots=True)
class PostgresHashVerifier:
    """
    Verifies plaintext candidates against PostgreSQL password digests.

    Supported formats:

    * ``md5``: ``"md5" + md5(password + role name)``.
    * ``scram-sha-256``: ``SCRAM-SHA-256$<iterations>:<salt>$<StoredKey>:<ServerKey>``
      with base64 encoded salt and keys.

    A digest that cannot be parsed never matches. Neither does a SCRAM digest asking
    for more than ``max_iterations`` PBKDF2 rounds.

    References:
        https://www.postgresql.org/docs/current/auth-password.html
        https://datatracker.ietf.org/doc/html/rfc7677
    """

    max_iterations: int = MAX_SCRAM_ITERATIONS

    def verify(
        self, scheme: HashScheme, digest: str, candidate: str, *, account_name: str
    ) -> bool:
        match scheme:
            case "md5":
                return self._verify_md5(digest, candidate, account_name)
            case "scram-sha-256":
                return self._verify_scram(digest, candidate, self.max_iterations)
            case _:
                raise UnsupportedHashSchemeError(
                    "Unrecognized password hash scheme {ctx[scheme]!r}",
                    ctx=UnsupportedHashSchemeError.Context(scheme=scheme),
                )

    @staticmethod
    def _verify_md5(digest: str, candidate: str, account_name: str) -> bool:
        try:
            return bool(postgres_md5.verify(candidate, digest, user=account_name))
        except ValueError as ex:
            logger.debug("unparsable md5 digest: %s", ex)
            return False

    @staticmethod
    def _verify_scram(digest: str, candidate: str, max_iterations: int) -> bool:
        try:
            method, params, keys = digest.split("$")
            iterations, salt = params.split(":")
            stored_key, server_key = (
                base64.b64decode(key, validate=True) for key in keys.split(":")
            )
            rounds = int(iterations)
            raw_salt = base64.b64decode(salt, validate=True)
        except ValueError as ex:
            logger.debug("unparsable scram-sha-256 digest: %s", ex)
            return False

        if method != SCRAM_METHOD or rounds < 1:
            logger.debug("unexpected scram-sha-256 digest header %r", method)
            return False

        if rounds > max_iterations:
            logger.debug(
                "scram-sha-256 digest asks for %d iterations, limit is %d",
                rounds,
                max_iterations,
            )
            return False

        # Like the server, fall back to the raw password when SASLprep refuses it.
        try:
            prepared = saslprep(candidate)
        except ValueError:
            prepared = candidate

        salted = hashlib.pbkdf2_hmac(
            "sha256", prepared.encode("utf-8"), raw_salt, rounds
        )
        client_key = hmac.new(salted, b"Client Key", hashlib.sha256).digest()

        return hmac.compare_digest(
            hashlib.sha256(client_key).digest(), stored_key
        ) and hmac.compare_digest(
            hmac.new(salted, b"Server Key", hashlib.sha256).digest(), server_key
        )
