"""Tests for bootstrap/types.py"""

import pytest

from stackboot import config
from stackboot.bootstrap.types import (
    BootstrapOutcome,
    BootstrapResult,
    LaunchResult,
    ReadinessReport,
)
from stackboot.errors import (
    BinaryNotFoundError,
    DaemonUnreachableError,
    LaunchFailedError,
    ReadinessTimedOutError,
    UnexpectedBootstrapError,
)


class TestBootstrapOutcome:
    def test_only_stack_started_is_success(self):
        assert [o for o in BootstrapOutcome if o.is_success] == [BootstrapOutcome.STACK_STARTED]

    @pytest.mark.parametrize("outcome", list(BootstrapOutcome))
    def test_every_outcome_has_text(self, outcome):
        assert outcome.title
        assert outcome.message

    def test_daemon_off_text(self):
        outcome = BootstrapOutcome.RUNTIME_DAEMON_OFF
        assert outcome.title == "Docker is not running"
        assert "Retry" in outcome.detail


class TestLaunchResult:
    def test_started(self):
        result = LaunchResult.started()
        assert result.ok
        assert result.step is None

    def test_failed(self):
        result = LaunchResult.failed(step="up", stdout="o", stderr="e", exit_code=2)
        assert not result.ok
        assert (result.step, result.stdout, result.stderr, result.exit_code) == ("up", "o", "e", 2)


class TestRaiseForOutcome:
    def test_success_does_not_raise(self):
        BootstrapResult(outcome=BootstrapOutcome.STACK_STARTED).raise_for_outcome()

    def test_missing(self):
        result = BootstrapResult(
            outcome=BootstrapOutcome.RUNTIME_MISSING, binary="podman"
        )
        with pytest.raises(BinaryNotFoundError) as exc_info:
            result.raise_for_outcome()
        assert exc_info.value.binary == "podman"

    def test_daemon_off(self):
        with pytest.raises(DaemonUnreachableError):
            BootstrapResult(outcome=BootstrapOutcome.RUNTIME_DAEMON_OFF).raise_for_outcome()

    def test_launch_failed_keeps_output(self):
        result = BootstrapResult(
            outcome=BootstrapOutcome.LAUNCH_FAILED,
            launch=LaunchResult.failed(step="pull", stdout="out", stderr="err", exit_code=18),
        )
        with pytest.raises(LaunchFailedError) as exc_info:
            result.raise_for_outcome()
        error = exc_info.value
        assert (error.step, error.stdout, error.stderr, error.exit_code) == (
            "pull", "out", "err", 18,
        )
        assert error.to_dict()["stderr"] == "err"

    def test_readiness_timed_out(self):
        result = BootstrapResult(
            outcome=BootstrapOutcome.READINESS_TIMED_OUT,
            url="http://localhost:3000",
            readiness=ReadinessReport(ready=False, elapsed=61.5, attempts=31),
        )
        with pytest.raises(ReadinessTimedOutError) as exc_info:
            result.raise_for_outcome()
        assert exc_info.value.elapsed == 61.5
        assert exc_info.value.url == "http://localhost:3000"

    def test_unexpected(self):
        result = BootstrapResult(outcome=BootstrapOutcome.UNEXPECTED_ERROR, error="boom")
        with pytest.raises(UnexpectedBootstrapError, match="boom"):
            result.raise_for_outcome()

    def test_elapsed_none_without_poll(self):
        assert BootstrapResult(outcome=BootstrapOutcome.LAUNCH_FAILED).elapsed is None

    def test_missing_without_binary_uses_configured_name(self):
        with pytest.raises(BinaryNotFoundError) as exc_info:
            BootstrapResult(outcome=BootstrapOutcome.RUNTIME_MISSING).raise_for_outcome()
        assert exc_info.value.binary == config.RUNTIME_BINARY


class TestBootstrapResult:
    def test_hashable(self):
        result = BootstrapResult(
            outcome=BootstrapOutcome.STACK_STARTED,
            url="http://localhost:3000",
            launch=LaunchResult.started(),
            readiness=ReadinessReport(ready=True, elapsed=4.0, attempts=3, last_status=200),
        )
        same = BootstrapResult(
            outcome=BootstrapOutcome.STACK_STARTED,
            url="http://localhost:3000",
            launch=LaunchResult.started(),
            readiness=ReadinessReport(ready=True, elapsed=4.0, attempts=3, last_status=200),
        )

        assert hash(result) == hash(same)
        assert len({result, same}) == 1

    def test_missing_result_hashable(self):
        result = BootstrapResult(outcome=BootstrapOutcome.RUNTIME_MISSING, binary="docker")
        assert {result: "missing"}[result] == "missing"
