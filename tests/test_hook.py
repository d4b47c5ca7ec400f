import logging

import pytest
from conftest import BrokenDictionaryGuard, FakeDictionaryGuard, md5_digest

from passpolicy import (
    PasswordCheckHook,
    PolicyConfiguration,
    PolicyEvaluator,
    PolicyState,
)
from passpolicy._conf import Settings
from passpolicy.dto import Accepted, Rejected, Rejection, RejectionReason
from passpolicy.exc import (
    DictionaryUnavailableError,
    InconsistentThresholdsError,
    PasswordRejectedError,
)


@pytest.fixture
def hook(policy: PolicyConfiguration) -> PasswordCheckHook:
    return PasswordCheckHook(state=PolicyState(policy))


def test_accepted_password_passes(hook: PasswordCheckHook) -> None:
    assert hook("alice", "Ab1!Ab1!") is None


@pytest.mark.parametrize(
    "account_name, password, message",
    [
        (
            "alice",
            "short1!",
            "password is too short, it must be at least 8 characters long",
        ),
        ("bob", "xbobAb1!", "password must not contain user name"),
        ("alice", "AAAAaaaa", "password must contain at least 2 numeric characters"),
    ],
)
def test_rejected_password_aborts_with_reason(
    hook: PasswordCheckHook, account_name: str, password: str, message: str
) -> None:
    with pytest.raises(PasswordRejectedError) as exc_info:
        hook(account_name, password)

    assert str(exc_info.value) == message
    assert exc_info.value.ctx["rejection"].message == message


def test_prehashed_password(hook: PasswordCheckHook) -> None:
    with pytest.raises(PasswordRejectedError):
        hook("alice", md5_digest("alice", "alice"), "md5")

    assert hook("alice", md5_digest("Ab1!Ab1!", "alice"), "md5") is None


def test_hook_follows_reloaded_policy(hook: PasswordCheckHook) -> None:
    hook.state.reload({"min_length": 12})

    verdict = hook.check("alice", "Ab1!Ab1!")

    assert isinstance(verdict, Rejected)
    assert verdict.reason.code is RejectionReason.TOO_SHORT
    assert verdict.reason.threshold == 12


def test_empty_account_name_is_contained_in_every_password(
    hook: PasswordCheckHook,
) -> None:
    verdict = hook.check("", "Ab1!Ab1!")

    assert verdict == Rejected(Rejection(RejectionReason.CONTAINS_USERNAME))


def test_empty_account_name_short_password_is_too_short(
    hook: PasswordCheckHook,
) -> None:
    verdict = hook.check("", "Ab1!")

    assert isinstance(verdict, Rejected)
    assert verdict.reason.code is RejectionReason.TOO_SHORT


def test_dictionary_failure_propagates_by_default(
    policy: PolicyConfiguration,
) -> None:
    hook = PasswordCheckHook(
        state=PolicyState(policy),
        evaluator=PolicyEvaluator(dictionary_guard=BrokenDictionaryGuard()),
    )

    with pytest.raises(DictionaryUnavailableError):
        hook("alice", "Ab1!Ab1!")


def test_dictionary_failure_open(
    policy: PolicyConfiguration, caplog: pytest.LogCaptureFixture
) -> None:
    hook = PasswordCheckHook(
        state=PolicyState(policy),
        evaluator=PolicyEvaluator(dictionary_guard=BrokenDictionaryGuard()),
        dictionary_failure="open",
    )

    with caplog.at_level(logging.WARNING, logger="passpolicy.hook"):
        verdict = hook.check("alice", "Ab1!Ab1!")

    assert verdict == Accepted()
    assert "accepting password without the check" in caplog.text


def test_dictionary_failure_open_still_applies_composition(
    policy: PolicyConfiguration,
) -> None:
    hook = PasswordCheckHook(
        state=PolicyState(policy),
        evaluator=PolicyEvaluator(dictionary_guard=BrokenDictionaryGuard()),
        dictionary_failure="open",
    )

    with pytest.raises(PasswordRejectedError, match="numeric characters"):
        hook("alice", "AAAAaaaa")


def test_dictionary_failure_closed(policy: PolicyConfiguration) -> None:
    hook = PasswordCheckHook(
        state=PolicyState(policy),
        evaluator=PolicyEvaluator(dictionary_guard=BrokenDictionaryGuard()),
        dictionary_failure="closed",
    )

    with pytest.raises(PasswordRejectedError) as exc_info:
        hook("alice", "Ab1!Ab1!")

    rejection = exc_info.value.ctx["rejection"]
    assert rejection.code is RejectionReason.DICTIONARY_UNAVAILABLE


def test_from_settings() -> None:
    hook = PasswordCheckHook.from_settings(
        Settings(
            policy={"p_policy.min_password_len": 10},
            dictionary={"enabled": False, "failureMode": "closed"},
        )
    )

    assert hook.state.current.min_length == 10
    assert hook.evaluator.dictionary_guard is None
    assert hook.dictionary_failure == "closed"


def test_from_settings_refuses_inconsistent_policy() -> None:
    with pytest.raises(InconsistentThresholdsError):
        PasswordCheckHook.from_settings(
            Settings(policy={"p_policy.min_password_len": 4})
        )


def test_weak_password_from_dictionary(policy: PolicyConfiguration) -> None:
    hook = PasswordCheckHook(
        state=PolicyState(policy),
        evaluator=PolicyEvaluator(
            dictionary_guard=FakeDictionaryGuard(weak={"Ab1!Ab1!"})
        ),
    )

    with pytest.raises(PasswordRejectedError) as exc_info:
        hook("alice", "Ab1!Ab1!")

    assert str(exc_info.value) == "password is easily cracked"
    assert exc_info.value.ctx["rejection"] == Rejection(RejectionReason.WEAK_SECRET)
