import logging
import os
import signal
import threading
from collections.abc import Mapping
from typing import Any

import pytest
from conftest import plaintext

from passpolicy import (
    PolicyConfiguration,
    PolicyEvaluator,
    PolicyState,
    install_reload_handler,
)
from passpolicy.dto import Accepted, Rejected, RejectionReason
from passpolicy.exc import (
    ConfigError,
    ConfigSourceError,
    InconsistentThresholdsError,
    OutOfRangeError,
)


def test_reload_publishes_new_configuration(policy: PolicyConfiguration) -> None:
    state = PolicyState(policy)

    new = state.reload({"min_length": 12})

    assert state.current is new
    assert state.current.min_length == 12


@pytest.mark.parametrize(
    "values, error",
    [
        ({"min_length": 0}, OutOfRangeError),
        ({"min_length": 7}, InconsistentThresholdsError),
        ({"min_length": 12, "min_digits": 11}, InconsistentThresholdsError),
    ],
)
def test_failed_reload_keeps_previous_configuration(
    policy: PolicyConfiguration,
    values: Mapping[str, Any],
    error: type[ConfigError],
) -> None:
    state = PolicyState(policy)

    with pytest.raises(error):
        state.reload(values)

    assert state.current is policy


def test_reload_logs_changed_thresholds(
    policy: PolicyConfiguration, caplog: pytest.LogCaptureFixture
) -> None:
    state = PolicyState(policy)

    with caplog.at_level(logging.INFO, logger="passpolicy.state"):
        state.reload({"min_length": 10})

    assert "p_policy.min_password_len" in caplog.text


@pytest.mark.usefixtures("restore_sighup")
def test_sighup_reloads_policy(policy: PolicyConfiguration) -> None:
    state = PolicyState(policy)
    install_reload_handler(state, lambda: {"min_length": 16})

    os.kill(os.getpid(), signal.SIGHUP)

    assert state.current.min_length == 16


@pytest.mark.usefixtures("restore_sighup")
def test_failed_sighup_reload_is_logged(
    policy: PolicyConfiguration, caplog: pytest.LogCaptureFixture
) -> None:
    state = PolicyState(policy)
    install_reload_handler(state, lambda: {"min_length": 4})

    with caplog.at_level(logging.ERROR, logger="passpolicy.state"):
        os.kill(os.getpid(), signal.SIGHUP)

    assert state.current is policy
    assert "reload failed, keeping the previous policy" in caplog.text


def test_concurrent_evaluations_see_a_complete_policy(
    policy: PolicyConfiguration,
) -> None:
    state = PolicyState(policy)
    evaluator = PolicyEvaluator()
    request = plaintext("alice", "Ab1!Ab1!xy")
    verdicts = []
    stop = threading.Event()

    def evaluate() -> None:
        while not stop.is_set():
            verdicts.append(evaluator.evaluate(state.current, request))

    workers = [threading.Thread(target=evaluate) for _ in range(4)]
    for worker in workers:
        worker.start()
    for min_length in (12, 8, 12, 8, 12):
        state.reload({"min_length": min_length})
    stop.set()
    for worker in workers:
        worker.join()

    for verdict in verdicts:
        if isinstance(verdict, Rejected):
            assert verdict.reason.code is RejectionReason.TOO_SHORT
            assert verdict.reason.threshold == 12
        else:
            assert verdict == Accepted()


@pytest.mark.usefixtures("restore_sighup")
def test_unreadable_settings_source_is_logged(
    policy: PolicyConfiguration, caplog: pytest.LogCaptureFixture
) -> None:
    def loader() -> Mapping[str, Any]:
        raise ConfigSourceError(
            "{ctx[reason]}",
            ctx=ConfigSourceError.Context(reason="unexpected '{' in line 1"),
        )

    state = PolicyState(policy)
    install_reload_handler(state, loader)

    with caplog.at_level(logging.ERROR, logger="passpolicy.state"):
        os.kill(os.getpid(), signal.SIGHUP)

    assert state.current is policy
    assert "unexpected '{' in line 1" in caplog.text
