"""Docker client for subprocess-based runtime interaction."""

import asyncio
import logging
import os
import shutil
from dataclasses import dataclass
from pathlib import Path

from stackboot import config

logger = logging.getLogger(__name__)

_READ_CHUNK_SIZE = 64 * 1024


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one runtime CLI invocation.

    exit_code is None when the process could not be started or was killed
    after exceeding its timeout.
    """

    args: tuple[str, ...]
    exit_code: int | None
    stdout: str = ""
    stderr: str = ""
    timed_out: bool = False

    @property
    def ok(self) -> bool:
        return self.exit_code == 0 and not self.timed_out


class DockerClient:
    """Client for the container runtime CLI via subprocess commands.

    Provides:
    - Binary resolution over PATH plus configurable install directories
    - Async command execution with a per-call timeout
    - Helpers for ``docker info`` and ``docker compose``
    """

    def __init__(
        self,
        binary: str | None = None,
        search_dirs: list[str] | None = None,
        default_timeout: float | None = None,
    ):
        """Initialize DockerClient.

        Args:
            binary: Executable name or absolute path. Default from config.
            search_dirs: Directories searched after PATH. Default from config.
            default_timeout: Timeout in seconds for run() calls that do not
                pass one. None means the probe timeout from config.
        """
        self._binary = binary or config.RUNTIME_BINARY
        self._search_dirs = (
            list(search_dirs) if search_dirs is not None else list(config.RUNTIME_SEARCH_DIRS)
        )
        self._default_timeout = default_timeout or config.PROBE_TIMEOUT_SECONDS

    @property
    def binary(self) -> str:
        return self._binary

    def search_path(self) -> str:
        """PATH entries followed by the extra search directories, deduplicated."""
        entries: list[str] = []
        for entry in os.environ.get("PATH", "").split(os.pathsep) + self._search_dirs:
            if entry and entry not in entries:
                entries.append(entry)
        return os.pathsep.join(entries)

    def resolve_binary(self) -> str | None:
        """Resolve the runtime executable.

        Returns:
            Absolute path to the executable, or None if not found.
        """
        if os.path.isabs(self._binary):
            path = Path(self._binary)
            if path.is_file() and os.access(path, os.X_OK):
                return str(path)
            return None
        return shutil.which(self._binary, path=self.search_path())

    async def run(
        self,
        *args: str,
        cwd: str | Path | None = None,
        timeout: float | None = None,
    ) -> CommandResult:
        """Execute a runtime command.

        Args:
            *args: Command arguments (e.g., "compose", "-f", "...", "pull")
            cwd: Working directory for the process
            timeout: Seconds before the process is killed

        Returns:
            CommandResult; command failures are reported, never raised.
        """
        executable = self.resolve_binary() or self._binary
        cmd = (executable, *args)
        timeout = timeout if timeout is not None else self._default_timeout

        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=str(cwd) if cwd is not None else None,
            )
        except OSError as e:
            logger.error(f"docker subprocess error: {' '.join(cmd)}: {e}")
            return CommandResult(args=cmd, exit_code=None, stderr=str(e))

        # Drained incrementally: partial output survives a kill.
        stdout = bytearray()
        stderr = bytearray()
        try:
            await asyncio.wait_for(
                asyncio.gather(
                    _drain(proc.stdout, stdout),
                    _drain(proc.stderr, stderr),
                    proc.wait(),
                ),
                timeout=timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(f"docker command timed out after {timeout}s: {' '.join(cmd)}")
            await _kill(proc)
            err = stderr.decode(errors="replace")
            if err and not err.endswith("\n"):
                err += "\n"
            return CommandResult(
                args=cmd,
                exit_code=None,
                stdout=stdout.decode(errors="replace"),
                stderr=f"{err}timed out after {timeout}s",
                timed_out=True,
            )
        except asyncio.CancelledError:
            logger.warning(f"docker command cancelled: {' '.join(cmd)}")
            await _kill(proc)
            raise

        result = CommandResult(
            args=cmd,
            exit_code=proc.returncode,
            stdout=stdout.decode(errors="replace"),
            stderr=stderr.decode(errors="replace"),
        )
        if not result.ok:
            logger.debug(
                f"docker command failed ({result.exit_code}): {' '.join(cmd)}: "
                f"{result.stderr.strip()}"
            )
        return result

    async def info(self, timeout: float | None = None) -> CommandResult:
        """Query engine status (``docker info``)."""
        return await self.run("info", timeout=timeout or config.PROBE_TIMEOUT_SECONDS)

    async def compose(
        self,
        compose_file: str | Path,
        *args: str,
        cwd: str | Path | None = None,
        timeout: float | None = None,
    ) -> CommandResult:
        """Run ``docker compose -f <compose_file> <args>``."""
        return await self.run(
            "compose", "-f", str(compose_file), *args, cwd=cwd, timeout=timeout
        )


async def _drain(stream: asyncio.StreamReader | None, buffer: bytearray) -> None:
    if stream is None:
        return
    while chunk := await stream.read(_READ_CHUNK_SIZE):
        buffer.extend(chunk)


async def _kill(proc: asyncio.subprocess.Process) -> None:
    """Kill a still-running process and reap it."""
    if proc.returncode is None:
        try:
            proc.kill()
        except ProcessLookupError:
            pass
    await proc.wait()
