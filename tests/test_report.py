"""Tests for report.py"""

import json

from stackboot.bootstrap.types import (
    BootstrapOutcome,
    BootstrapResult,
    LaunchResult,
    ReadinessReport,
)
from stackboot.report import BootstrapReport


class TestBootstrapReport:
    def test_started(self):
        result = BootstrapResult(
            outcome=BootstrapOutcome.STACK_STARTED,
            url="http://localhost:3000",
            probes=2,
            launch=LaunchResult.started(),
            readiness=ReadinessReport(ready=True, elapsed=4.0, attempts=3),
        )

        report = BootstrapReport.from_result(result)

        assert report.ok is True
        assert report.outcome == "stack_started"
        assert report.probes == 2
        assert report.elapsed == 4.0
        assert report.attempts == 3
        assert report.launch is None

    def test_launch_failed_carries_output(self):
        result = BootstrapResult(
            outcome=BootstrapOutcome.LAUNCH_FAILED,
            probes=1,
            launch=LaunchResult.failed(step="pull", stdout="Pulling", stderr="denied", exit_code=1),
        )

        data = json.loads(BootstrapReport.from_result(result).model_dump_json())

        assert data["ok"] is False
        assert data["title"] == "Failed to start Docker stack"
        assert data["launch"] == {
            "step": "pull",
            "exit_code": 1,
            "stdout": "Pulling",
            "stderr": "denied",
        }
        assert data["elapsed"] is None

    def test_unexpected_error(self):
        result = BootstrapResult(outcome=BootstrapOutcome.UNEXPECTED_ERROR, error="RuntimeError: x")

        report = BootstrapReport.from_result(result)

        assert report.error == "RuntimeError: x"
        assert report.message == BootstrapOutcome.UNEXPECTED_ERROR.message
