"""Bootstrap 编排器

状态机：
    START → Probe
    Probe: READY → Launch
    Probe: MISSING → RUNTIME_MISSING（终态）
    Probe: DAEMON_OFF → 询问调用方 {RETRY → Probe, QUIT → RUNTIME_DAEMON_OFF（终态）}
    Launch: 成功 → Poll
    Launch: 失败 → LAUNCH_FAILED（终态）
    Poll: 就绪 → STACK_STARTED（终态）
    Poll: 超时 → READINESS_TIMED_OUT（终态）

DAEMON_OFF 的重试是显式循环；任何未预期异常（包括决策回调抛出）
收敛为 UNEXPECTED_ERROR。
"""

import inspect
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

from ..errors import BootstrapInProgressError
from ..telemetry import get_logger, metrics
from .launcher import StackLauncher
from .probe import RuntimeProbe
from .readiness import ReadinessPoller
from .target import HostEnvironment, resolve_stack_target
from .types import (
    BootstrapOutcome,
    BootstrapPhase,
    BootstrapResult,
    ReadinessSpec,
    RetryDecision,
    RuntimeAvailability,
)

logger = get_logger(__name__)

# (outcome, daemon_off_count) -> decision；同步或异步均可
DecisionCallback = Callable[[BootstrapOutcome, int], RetryDecision | Awaitable[RetryDecision]]
PhaseCallback = Callable[[BootstrapPhase], Any]


async def _maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


@dataclass
class BootstrapContext:
    """在调用方和编排器之间传递的上下文

    Attributes:
        host: 宿主运行状态（决定 compose 文件位置）
        readiness: 就绪轮询参数
        decide: DAEMON_OFF 时的决策回调，None 等同于 QUIT
        on_phase: 阶段变化通知（可选）
        max_retries: DAEMON_OFF 最多重试次数，None 表示不限
        pull: 是否在启动前拉取镜像
    """

    host: HostEnvironment = field(default_factory=HostEnvironment.detect)
    readiness: ReadinessSpec = field(default_factory=ReadinessSpec)
    decide: DecisionCallback | None = None
    on_phase: PhaseCallback | None = None
    max_retries: int | None = None
    pull: bool = True


class BootstrapOrchestrator:
    """Probe → Launch → Poll 编排器

    同一实例同一时间只允许一次 run()。
    """

    def __init__(
        self,
        probe: RuntimeProbe | None = None,
        launcher: StackLauncher | None = None,
        poller: ReadinessPoller | None = None,
    ):
        self._probe = probe or RuntimeProbe()
        self._launcher = launcher or StackLauncher()
        self._poller = poller or ReadinessPoller()
        self._running = False
        self._probes = 0

    @property
    def is_running(self) -> bool:
        return self._running

    async def run(self, context: BootstrapContext) -> BootstrapResult:
        """执行一次 bootstrap

        Raises:
            BootstrapInProgressError: 已有 run() 在进行中
        """
        if self._running:
            raise BootstrapInProgressError("A bootstrap run is already in progress")
        self._running = True
        self._probes = 0

        try:
            result = await self._run(context)
        except Exception as e:
            logger.exception(f"[Bootstrap] unexpected error: {e}")
            result = BootstrapResult(
                outcome=BootstrapOutcome.UNEXPECTED_ERROR,
                url=context.readiness.url,
                probes=self._probes,
                error=f"{type(e).__name__}: {e}",
            )
        finally:
            self._running = False

        logger.info(f"[Bootstrap] outcome: {result.outcome.value}")
        metrics.inc("bootstrap.outcome", {"outcome": result.outcome.value})
        return result

    async def _run(self, context: BootstrapContext) -> BootstrapResult:
        target = resolve_stack_target(context.host)
        url = context.readiness.url
        retries = 0

        while True:
            await self._phase(context, BootstrapPhase.PROBING)
            self._probes += 1
            availability = await self._probe.probe()

            if availability == RuntimeAvailability.READY:
                break
            if availability == RuntimeAvailability.MISSING:
                return await self._finish(
                    context,
                    BootstrapResult(
                        outcome=BootstrapOutcome.RUNTIME_MISSING,
                        url=url,
                        probes=self._probes,
                        binary=str(self._probe.client.binary),
                    ),
                )

            await self._phase(context, BootstrapPhase.AWAITING_DECISION)
            decision = await self._decide(context, retries + 1)
            if decision == RetryDecision.RETRY and (
                context.max_retries is None or retries < context.max_retries
            ):
                retries += 1
                logger.info(f"[Bootstrap] retrying probe ({retries})")
                continue
            return await self._finish(
                context,
                BootstrapResult(
                    outcome=BootstrapOutcome.RUNTIME_DAEMON_OFF,
                    url=url,
                    probes=self._probes,
                ),
            )

        await self._phase(context, BootstrapPhase.LAUNCHING)
        launch = await self._launcher.start(target, pull=context.pull)
        if not launch.ok:
            return await self._finish(
                context,
                BootstrapResult(
                    outcome=BootstrapOutcome.LAUNCH_FAILED,
                    url=url,
                    probes=self._probes,
                    launch=launch,
                ),
            )

        await self._phase(context, BootstrapPhase.POLLING)
        report = await self._poller.poll(context.readiness)
        outcome = (
            BootstrapOutcome.STACK_STARTED if report.ready else BootstrapOutcome.READINESS_TIMED_OUT
        )
        return await self._finish(
            context,
            BootstrapResult(
                outcome=outcome,
                url=url,
                probes=self._probes,
                launch=launch,
                readiness=report,
            ),
        )

    async def _decide(self, context: BootstrapContext, occurrence: int) -> RetryDecision:
        if context.decide is None:
            return RetryDecision.QUIT
        decision = await _maybe_await(
            context.decide(BootstrapOutcome.RUNTIME_DAEMON_OFF, occurrence)
        )
        if not isinstance(decision, RetryDecision):
            raise TypeError(f"decision callback returned {decision!r}, expected RetryDecision")
        logger.info(f"[Bootstrap] daemon off, caller chose {decision.value}")
        return decision

    async def _phase(self, context: BootstrapContext, phase: BootstrapPhase) -> None:
        logger.debug(f"[Bootstrap] phase: {phase.value}")
        if context.on_phase is not None:
            await _maybe_await(context.on_phase(phase))

    async def _finish(self, context: BootstrapContext, result: BootstrapResult) -> BootstrapResult:
        await self._phase(context, BootstrapPhase.DONE)
        return result
