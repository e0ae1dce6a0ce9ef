"""Tests for bootstrap/launcher.py"""

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from stackboot.bootstrap.launcher import StackLauncher
from stackboot.bootstrap.types import StackTarget
from stackboot.docker.client import CommandResult
from stackboot.telemetry import metrics

TARGET = StackTarget(
    compose_file=Path("/app/docker/docker-compose.yml"),
    working_dir=Path("/work"),
)


def ok(*args: str) -> CommandResult:
    return CommandResult(args=args, exit_code=0, stdout="done\n")


def make_client(*results: CommandResult) -> MagicMock:
    client = MagicMock()
    client.compose = AsyncMock(side_effect=list(results))
    return client


def compose_steps(client: MagicMock) -> list[tuple[str, ...]]:
    """每次 compose 调用中 compose 文件之后的参数"""
    return [call.args[1:] for call in client.compose.call_args_list]


class TestStackLauncher:
    @pytest.mark.asyncio
    async def test_pull_then_up(self):
        client = make_client(ok("pull"), ok("up"))
        launcher = StackLauncher(client, pull_timeout=100, up_timeout=50)

        result = await launcher.start(TARGET)

        assert result.ok
        assert result.step is None
        assert compose_steps(client) == [("pull",), ("up", "-d")]
        first, second = client.compose.call_args_list
        assert first.args[0] == TARGET.compose_file
        assert first.kwargs == {"cwd": TARGET.working_dir, "timeout": 100}
        assert second.kwargs == {"cwd": TARGET.working_dir, "timeout": 50}

    @pytest.mark.asyncio
    async def test_pull_failure_skips_up(self):
        client = make_client(
            CommandResult(
                args=("pull",),
                exit_code=18,
                stdout="Pulling web ...\n",
                stderr="manifest unknown\n",
            ),
        )

        result = await StackLauncher(client).start(TARGET)

        assert not result.ok
        assert result.step == "pull"
        assert result.exit_code == 18
        assert result.stdout == "Pulling web ...\n"
        assert result.stderr == "manifest unknown\n"
        assert client.compose.await_count == 1

    @pytest.mark.asyncio
    async def test_up_failure(self):
        client = make_client(
            ok("pull"),
            CommandResult(args=("up",), exit_code=1, stderr="port is already allocated"),
        )

        result = await StackLauncher(client).start(TARGET)

        assert not result.ok
        assert result.step == "up"
        assert result.stderr == "port is already allocated"
        assert metrics.get_counter("launch.result", {"result": "failed", "step": "up"}) == 1

    @pytest.mark.asyncio
    async def test_timeout_is_failure(self):
        client = make_client(
            CommandResult(args=("pull",), exit_code=None, stderr="timed out after 1s", timed_out=True),
        )

        result = await StackLauncher(client).start(TARGET)

        assert not result.ok
        assert result.exit_code is None
        assert "pull" in result.stderr
        assert "timed out" in result.stderr

    @pytest.mark.asyncio
    async def test_timeout_keeps_partial_output(self):
        client = make_client(
            CommandResult(
                args=("pull",),
                exit_code=None,
                stdout="web Pulling\n",
                stderr="registry slow\ntimed out after 600.0s",
                timed_out=True,
            ),
        )

        result = await StackLauncher(client).start(TARGET)

        assert result.step == "pull"
        assert result.stdout == "web Pulling\n"
        assert result.stderr == "registry slow\ndocker compose pull timed out after 600.0s"

    @pytest.mark.asyncio
    async def test_skip_pull(self):
        client = make_client(ok("up"))

        result = await StackLauncher(client).start(TARGET, pull=False)

        assert result.ok
        assert compose_steps(client) == [("up", "-d")]

    @pytest.mark.asyncio
    async def test_start_twice_does_not_error(self):
        """已运行的 stack 再次启动由 compose 自行 reconcile"""
        client = make_client(ok("pull"), ok("up"), ok("pull"), ok("up"))
        launcher = StackLauncher(client)

        assert (await launcher.start(TARGET)).ok
        assert (await launcher.start(TARGET)).ok
        assert metrics.get_counter("launch.result", {"result": "started"}) == 2
