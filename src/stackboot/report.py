"""Bootstrap 结果报告 - 展示层消费的序列化结构"""

from pydantic import BaseModel

from .bootstrap.types import BootstrapResult


class LaunchDiagnostics(BaseModel):
    """compose 失败时的诊断输出"""

    step: str | None = None
    exit_code: int | None = None
    stdout: str = ""
    stderr: str = ""


class BootstrapReport(BaseModel):
    """一次 bootstrap 的报告"""

    outcome: str  # BootstrapOutcome.value
    ok: bool
    title: str
    message: str
    detail: str = ""
    url: str | None = None
    probes: int = 0
    elapsed: float | None = None  # 就绪等待时间（秒）
    attempts: int | None = None  # 就绪轮询次数
    launch: LaunchDiagnostics | None = None
    error: str | None = None

    @classmethod
    def from_result(cls, result: BootstrapResult) -> "BootstrapReport":
        outcome = result.outcome
        launch = None
        if result.launch is not None and not result.launch.ok:
            launch = LaunchDiagnostics(
                step=result.launch.step,
                exit_code=result.launch.exit_code,
                stdout=result.launch.stdout,
                stderr=result.launch.stderr,
            )
        return cls(
            outcome=outcome.value,
            ok=result.ok,
            title=outcome.title,
            message=outcome.message,
            detail=outcome.detail,
            url=result.url,
            probes=result.probes,
            elapsed=result.elapsed,
            attempts=result.readiness.attempts if result.readiness else None,
            launch=launch,
            error=result.error,
        )
