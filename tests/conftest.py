import base64
import hashlib
import hmac
import signal
from collections.abc import Iterator
from dataclasses import dataclass, field

import pytest

from passpolicy import PolicyConfiguration, PolicyEvaluator
from passpolicy.dto import CredentialChangeRequest, Plaintext, PreHashed
from passpolicy.exc import DictionaryUnavailableError


def md5_digest(password: str, account_name: str) -> str:
    return "md5" + hashlib.md5((password + account_name).encode()).hexdigest()


def scram_digest(
    password: str, salt: bytes = b"pepper-and-salt!", iterations: int = 16
) -> str:
    salted = hashlib.pbkdf2_hmac("sha256", password.encode(), salt, iterations)
    client_key = hmac.new(salted, b"Client Key", hashlib.sha256).digest()
    stored_key = hashlib.sha256(client_key).digest()
    server_key = hmac.new(salted, b"Server Key", hashlib.sha256).digest()

    def b64(value: bytes) -> str:
        return base64.b64encode(value).decode()

    return "SCRAM-SHA-256$%d:%s$%s:%s" % (
        iterations,
        b64(salt),
        b64(stored_key),
        b64(server_key),
    )


def plaintext(account_name: str, password: str) -> CredentialChangeRequest:
    return CredentialChangeRequest(
        account_name=account_name, secret=Plaintext(value=password)
    )


def prehashed(account_name: str, scheme: str, digest: str) -> CredentialChangeRequest:
    return CredentialChangeRequest(
        account_name=account_name,
        secret=PreHashed(scheme=scheme, digest=digest),  # type: ignore[arg-type]
    )


@dataclass
class FakeDictionaryGuard:
    weak: set[str] = field(default_factory=set)
    calls: list[str] = field(default_factory=list)

    def is_weak(self, plaintext: str) -> bool:
        self.calls.append(plaintext)
        return plaintext in self.weak


@dataclass
class BrokenDictionaryGuard:
    def is_weak(self, plaintext: str) -> bool:
        raise DictionaryUnavailableError(
            "Weak password dictionary {ctx[dictpath]!r} is unavailable: "
            "{ctx[reason]}",
            ctx=DictionaryUnavailableError.Context(
                dictpath="/nonexistent/pw_dict", reason="error loading dictionary"
            ),
        )


@pytest.fixture
def policy() -> PolicyConfiguration:
    return PolicyConfiguration(
        min_length=8, min_digits=2, min_special=2, min_upper=2, min_lower=2
    )


@pytest.fixture
def evaluator() -> PolicyEvaluator:
    return PolicyEvaluator()


@pytest.fixture
def restore_sighup() -> Iterator[None]:
    if not hasattr(signal, "SIGHUP"):
        pytest.skip("SIGHUP is not available on this platform")
    previous = signal.getsignal(signal.SIGHUP)
    yield
    signal.signal(signal.SIGHUP, previous)
