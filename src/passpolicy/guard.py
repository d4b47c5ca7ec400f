from .analyzer import as_bytes
from .dto.request import Plaintext, PreHashed, SecretRepresentation
from .hashing import HashVerifier

__all__ = ("contains_username",)


def contains_username(
    account_name: str, secret: SecretRepresentation, verifier: HashVerifier
) -> bool:
    """
    Returns ``True`` if the password can be trivially derived from the account name.

    For a plaintext password this is a case-sensitive, byte-wise substring test.

    A pre-hashed password cannot be searched, so the only case caught is the password
    being exactly the account name: the account name is hashed under the declared
    scheme and compared with the digest. Doing better would require the plaintext,
    which the client chose not to send.
    """
    match secret:
        case Plaintext():
            return as_bytes(account_name) in as_bytes(secret.value.get_secret_value())
        case PreHashed():
            return verifier.verify(
                secret.scheme,
                secret.digest.get_secret_value(),
                account_name,
                account_name=account_name,
            )
        case _:
            raise NotImplementedError(
                "Unsupported secret representation: %r" % type(secret).__name__
            )
