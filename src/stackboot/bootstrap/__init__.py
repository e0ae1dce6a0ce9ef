"""Bootstrap module - probe, launch and readiness orchestration"""

from .launcher import StackLauncher
from .orchestrator import BootstrapContext, BootstrapOrchestrator
from .probe import RuntimeProbe
from .readiness import ReadinessPoller
from .target import HostEnvironment, resolve_stack_target
from .types import (
    BootstrapOutcome,
    BootstrapPhase,
    BootstrapResult,
    LaunchResult,
    ReadinessReport,
    ReadinessSpec,
    RetryDecision,
    RuntimeAvailability,
    StackTarget,
)

__all__ = [
    "BootstrapContext",
    "BootstrapOrchestrator",
    "BootstrapOutcome",
    "BootstrapPhase",
    "BootstrapResult",
    "HostEnvironment",
    "LaunchResult",
    "ReadinessPoller",
    "ReadinessReport",
    "ReadinessSpec",
    "RetryDecision",
    "RuntimeAvailability",
    "RuntimeProbe",
    "StackLauncher",
    "StackTarget",
    "resolve_stack_target",
]
