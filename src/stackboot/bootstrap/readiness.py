"""HTTP 就绪轮询器

单调时钟计时，循环发起 GET：
- 跟随重定向，最终响应 2xx → 就绪
- 网络层错误或非 2xx → 视为尚未就绪，sleep interval 后重试
- 已用时间 ≥ timeout → 放弃

最后一次尝试可能让总时间略超 timeout（最多一个 interval 加一次请求超时）。
"""

import asyncio
import time
from collections.abc import Awaitable, Callable

import httpx

from ..telemetry import get_logger, metrics
from .types import ReadinessReport, ReadinessSpec

logger = get_logger(__name__)


class ReadinessPoller:
    """HTTP 就绪轮询器

    clock / sleep / transport 可注入，便于测试。
    """

    def __init__(
        self,
        transport: httpx.AsyncBaseTransport | None = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self._transport = transport
        self._clock = clock
        self._sleep = sleep

    async def wait_until_ready(self, spec: ReadinessSpec) -> bool:
        report = await self.poll(spec)
        return report.ready

    async def poll(self, spec: ReadinessSpec) -> ReadinessReport:
        """轮询直到就绪或超时

        Args:
            spec: 目标 URL、总超时、轮询间隔

        Returns:
            ReadinessReport
        """
        start = self._clock()
        attempts = 0
        last_status: int | None = None
        last_error: str | None = None

        logger.info(f"[Readiness] waiting for {spec.url} (timeout={spec.timeout}s)")
        async with httpx.AsyncClient(
            timeout=spec.request_timeout,
            transport=self._transport,
            follow_redirects=True,
        ) as client:
            while self._clock() - start < spec.timeout:
                attempts += 1
                try:
                    response = await client.get(spec.url)
                    last_status = response.status_code
                    last_error = None
                    if response.is_success:
                        return self._report(True, start, attempts, last_status, None)
                    logger.debug(f"[Readiness] {spec.url} -> {last_status}")
                except httpx.RequestError as e:
                    last_error = f"{type(e).__name__}: {e}"
                    logger.debug(f"[Readiness] {spec.url} not reachable: {last_error}")
                await self._sleep(spec.interval)

        return self._report(False, start, attempts, last_status, last_error)

    def _report(
        self,
        ready: bool,
        start: float,
        attempts: int,
        last_status: int | None,
        last_error: str | None,
    ) -> ReadinessReport:
        elapsed = self._clock() - start
        if ready:
            logger.info(f"[Readiness] ready after {elapsed:.1f}s ({attempts} attempts)")
        else:
            logger.warning(f"[Readiness] not ready after {elapsed:.1f}s ({attempts} attempts)")
        metrics.inc("readiness.attempts", value=attempts)
        metrics.gauge("readiness.elapsed", elapsed)
        return ReadinessReport(
            ready=ready,
            elapsed=elapsed,
            attempts=attempts,
            last_status=last_status,
            last_error=last_error,
        )
