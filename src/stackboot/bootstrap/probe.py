"""运行时探测

两步独立检查：
1. 可执行文件是否存在 → 否则 MISSING（跳过第二步）
2. engine 是否可达（docker info）→ 否则 DAEMON_OFF

两者分开是因为用户的补救方式不同：安装 vs 启动并等待。
"""

from ..docker import DockerClient
from ..telemetry import get_logger, metrics, truncate_output
from .types import RuntimeAvailability

logger = get_logger(__name__)


class RuntimeProbe:
    """容器运行时探测器

    每次调用 probe() 都重新探测，不缓存结果。
    """

    def __init__(self, client: DockerClient | None = None, timeout: float | None = None):
        self._client = client or DockerClient()
        self._timeout = timeout

    @property
    def client(self) -> DockerClient:
        return self._client

    async def probe(self) -> RuntimeAvailability:
        result = await self._probe()
        metrics.inc("probe.result", {"result": result.value})
        return result

    async def _probe(self) -> RuntimeAvailability:
        binary = self._client.resolve_binary()
        if binary is None:
            logger.warning(f"[Probe] {self._client.binary} not found on search path")
            return RuntimeAvailability.MISSING

        logger.debug(f"[Probe] using {binary}")
        info = await self._client.info(timeout=self._timeout)
        if not info.ok:
            reason = "timed out" if info.timed_out else truncate_output(info.stderr.strip(), 200)
            logger.warning(f"[Probe] engine unreachable: {reason}")
            return RuntimeAvailability.DAEMON_OFF

        logger.info("[Probe] runtime ready")
        return RuntimeAvailability.READY
