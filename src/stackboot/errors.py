"""Exception taxonomy for stack bootstrapping.

Components report expected failures as values (``RuntimeAvailability``,
``LaunchResult``, ``ReadinessReport``). These exceptions exist for callers
that prefer raising, via ``BootstrapResult.raise_for_outcome()``, and for
misuse of the orchestrator.
"""

from typing import Any


class StackbootError(Exception):
    """Base exception for stackboot errors."""

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for JSON output."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            **self.context,
        }


class BinaryNotFoundError(StackbootError):
    """The container runtime executable could not be resolved."""

    def __init__(self, binary: str) -> None:
        super().__init__(f"Container runtime '{binary}' not found", binary=binary)
        self.binary = binary


class DaemonUnreachableError(StackbootError):
    """The runtime binary exists but its engine does not answer."""


class LaunchFailedError(StackbootError):
    """A compose step failed; carries the captured output of that step."""

    def __init__(
        self,
        step: str,
        stdout: str = "",
        stderr: str = "",
        exit_code: int | None = None,
    ) -> None:
        super().__init__(
            f"compose {step} failed (exit code {exit_code})",
            step=step,
            stdout=stdout,
            stderr=stderr,
            exit_code=exit_code,
        )
        self.step = step
        self.stdout = stdout
        self.stderr = stderr
        self.exit_code = exit_code


class ReadinessTimedOutError(StackbootError):
    """The HTTP endpoint did not answer successfully before the deadline."""

    def __init__(self, url: str, elapsed: float) -> None:
        super().__init__(
            f"{url} not ready after {elapsed:.1f}s", url=url, elapsed=elapsed
        )
        self.url = url
        self.elapsed = elapsed


class UnexpectedBootstrapError(StackbootError):
    """Something outside the modelled failure paths went wrong."""


class BootstrapInProgressError(StackbootError, RuntimeError):
    """run() was called while another run on the same orchestrator is active."""
