"""Stack 启动器

依次执行 compose pull 和 compose up -d，两步作为一个整体报告错误：
任一步失败都返回携带该步输出的 LaunchResult，pull 失败时不执行 up。
重复调用依赖 compose 自身的 reconcile，不做额外记录。
"""

from .. import config
from ..docker import CommandResult, DockerClient
from ..telemetry import get_logger, metrics, truncate_output
from .types import LaunchResult, StackTarget

logger = get_logger(__name__)


class StackLauncher:
    """Compose stack 启动器（不做自动重试）"""

    def __init__(
        self,
        client: DockerClient | None = None,
        pull_timeout: float | None = None,
        up_timeout: float | None = None,
    ):
        self._client = client or DockerClient()
        self._pull_timeout = pull_timeout or config.PULL_TIMEOUT_SECONDS
        self._up_timeout = up_timeout or config.UP_TIMEOUT_SECONDS

    async def start(self, target: StackTarget, pull: bool = True) -> LaunchResult:
        """拉取镜像并以 detached 模式启动 stack

        Args:
            target: compose 文件和执行目录
            pull: False 时跳过 pull（离线启动）

        Returns:
            LaunchResult
        """
        logger.info(f"[Launcher] compose file: {target.compose_file}")

        steps: list[tuple[str, tuple[str, ...], float]] = []
        if pull:
            steps.append(("pull", ("pull",), self._pull_timeout))
        steps.append(("up", ("up", "-d"), self._up_timeout))

        for step, args, timeout in steps:
            logger.info(f"[Launcher] running docker compose {' '.join(args)}...")
            result = await self._client.compose(
                target.compose_file, *args, cwd=target.working_dir, timeout=timeout
            )
            if not result.ok:
                return self._failed(step, result)

        logger.info("[Launcher] stack started")
        metrics.inc("launch.result", {"result": "started"})
        return LaunchResult.started()

    def _failed(self, step: str, result: CommandResult) -> LaunchResult:
        stderr = result.stderr
        if result.timed_out:
            # 超时说明总在最后一行，之前是被杀前已输出的内容
            output, _, note = stderr.rpartition("\n")
            stderr = f"{output}\n" if output else ""
            stderr += f"docker compose {step} {note}"
        logger.error(
            f"[Launcher] docker compose {step} failed (exit={result.exit_code}): "
            f"{truncate_output(stderr.strip(), config.LOG_MAX_OUTPUT_LEN)}"
        )
        metrics.inc("launch.result", {"result": "failed", "step": step})
        return LaunchResult.failed(
            step=step,
            stdout=result.stdout,
            stderr=stderr,
            exit_code=result.exit_code,
        )
