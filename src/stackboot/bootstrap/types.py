"""Bootstrap 数据类型定义

包含：
- RuntimeAvailability: 运行时探测结果
- BootstrapOutcome: 一次 bootstrap 的终态
- BootstrapPhase: 运行中的瞬态（通知给展示层）
- RetryDecision: DaemonOff 时展示层的决定
- StackTarget / ReadinessSpec: 不可变输入
- LaunchResult / ReadinessReport / BootstrapResult: 各阶段结果
"""

import math
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

import httpx

from .. import config
from ..errors import (
    BinaryNotFoundError,
    DaemonUnreachableError,
    LaunchFailedError,
    ReadinessTimedOutError,
    UnexpectedBootstrapError,
)


class RuntimeAvailability(Enum):
    """容器运行时可用性

    - READY: 可执行文件存在，engine 可达
    - MISSING: 找不到可执行文件（需要安装）
    - DAEMON_OFF: 可执行文件存在但 engine 不可达（需要启动）
    """

    READY = "ready"
    MISSING = "missing"
    DAEMON_OFF = "daemon_off"


class BootstrapOutcome(Enum):
    """Bootstrap 终态

    每个终态附带展示层使用的标题和提示文本。
    """

    RUNTIME_MISSING = "runtime_missing"
    RUNTIME_DAEMON_OFF = "runtime_daemon_off"
    STACK_STARTED = "stack_started"
    LAUNCH_FAILED = "launch_failed"
    READINESS_TIMED_OUT = "readiness_timed_out"
    UNEXPECTED_ERROR = "unexpected_error"

    @property
    def is_success(self) -> bool:
        return self == BootstrapOutcome.STACK_STARTED

    @property
    def title(self) -> str:
        return _OUTCOME_TEXT[self][0]

    @property
    def message(self) -> str:
        return _OUTCOME_TEXT[self][1]

    @property
    def detail(self) -> str:
        return _OUTCOME_TEXT[self][2]


_OUTCOME_TEXT: dict[BootstrapOutcome, tuple[str, str, str]] = {
    BootstrapOutcome.RUNTIME_MISSING: (
        "Docker is not installed",
        "Docker Desktop could not be found on this computer.",
        "Install Docker Desktop, then start the application again.",
    ),
    BootstrapOutcome.RUNTIME_DAEMON_OFF: (
        "Docker is not running",
        "Docker Desktop is installed but not running.",
        "Start Docker Desktop, wait until it finishes starting, then click Retry.",
    ),
    BootstrapOutcome.STACK_STARTED: (
        "Stack started",
        "The containers are running and the web server is responding.",
        "",
    ),
    BootstrapOutcome.LAUNCH_FAILED: (
        "Failed to start Docker stack",
        "Docker Compose returned an error.",
        "Check the captured output below, or open Docker Desktop for details.",
    ),
    BootstrapOutcome.READINESS_TIMED_OUT: (
        "Backend not responding",
        "The containers started, but the web server did not respond in time.",
        "Check the container logs in Docker Desktop.",
    ),
    BootstrapOutcome.UNEXPECTED_ERROR: (
        "Unexpected error",
        "Something went wrong while starting the Docker stack.",
        "",
    ),
}


class BootstrapPhase(Enum):
    """运行中的瞬态"""

    PROBING = "probing"
    AWAITING_DECISION = "awaiting_decision"
    LAUNCHING = "launching"
    POLLING = "polling"
    DONE = "done"


class RetryDecision(Enum):
    """DaemonOff 时展示层返回的决定"""

    RETRY = "retry"
    QUIT = "quit"


@dataclass(frozen=True)
class StackTarget:
    """已解析的 stack 定义位置"""

    compose_file: Path
    working_dir: Path


@dataclass(frozen=True)
class ReadinessSpec:
    """就绪轮询参数

    构造时校验：URL 必须是带 host 的 http/https 地址，时间参数必须为有限正数。
    """

    url: str = config.APP_URL
    timeout: float = config.READINESS_TIMEOUT_SECONDS
    interval: float = config.READINESS_INTERVAL_SECONDS
    request_timeout: float = config.READINESS_REQUEST_TIMEOUT_SECONDS

    def __post_init__(self) -> None:
        try:
            parsed = httpx.URL(self.url)
        except httpx.InvalidURL as e:
            raise ValueError(f"Invalid readiness URL {self.url!r}: {e}") from e
        if parsed.scheme not in ("http", "https") or not parsed.host:
            raise ValueError(f"Readiness URL must be http(s) with a host: {self.url!r}")
        for name in ("timeout", "interval", "request_timeout"):
            value = getattr(self, name)
            if not math.isfinite(value) or value <= 0:
                raise ValueError(f"ReadinessSpec.{name} must be a finite positive number")


@dataclass(frozen=True)
class LaunchResult:
    """StackLauncher.start() 的结果

    失败时 step 为失败的步骤（"pull" 或 "up"），携带该步骤的输出。
    """

    ok: bool
    step: str | None = None
    stdout: str = ""
    stderr: str = ""
    exit_code: int | None = None

    @classmethod
    def started(cls) -> "LaunchResult":
        return cls(ok=True)

    @classmethod
    def failed(
        cls, step: str, stdout: str = "", stderr: str = "", exit_code: int | None = None
    ) -> "LaunchResult":
        return cls(ok=False, step=step, stdout=stdout, stderr=stderr, exit_code=exit_code)


@dataclass(frozen=True)
class ReadinessReport:
    """ReadinessPoller.poll() 的结果"""

    ready: bool
    elapsed: float
    attempts: int
    last_status: int | None = None
    last_error: str | None = None


@dataclass(frozen=True)
class BootstrapResult:
    """一次 bootstrap 的终态和诊断信息

    binary 仅在 RUNTIME_MISSING 时填写：未找到的运行时可执行文件名。
    """

    outcome: BootstrapOutcome
    url: str | None = None
    probes: int = 0
    launch: LaunchResult | None = None
    readiness: ReadinessReport | None = None
    error: str | None = None
    binary: str | None = None

    @property
    def ok(self) -> bool:
        return self.outcome.is_success

    @property
    def elapsed(self) -> float | None:
        """就绪等待时间（秒），未进入轮询时为 None"""
        return self.readiness.elapsed if self.readiness else None

    def raise_for_outcome(self) -> None:
        """失败终态转换为对应异常；成功时什么都不做"""
        outcome = self.outcome
        if outcome == BootstrapOutcome.STACK_STARTED:
            return
        if outcome == BootstrapOutcome.RUNTIME_MISSING:
            raise BinaryNotFoundError(self.binary or config.RUNTIME_BINARY)
        if outcome == BootstrapOutcome.RUNTIME_DAEMON_OFF:
            raise DaemonUnreachableError(outcome.message)
        if outcome == BootstrapOutcome.LAUNCH_FAILED:
            launch = self.launch or LaunchResult.failed(step="unknown")
            raise LaunchFailedError(
                step=launch.step or "unknown",
                stdout=launch.stdout,
                stderr=launch.stderr,
                exit_code=launch.exit_code,
            )
        if outcome == BootstrapOutcome.READINESS_TIMED_OUT:
            raise ReadinessTimedOutError(self.url or "", self.elapsed or 0.0)
        raise UnexpectedBootstrapError(self.error or outcome.message)
