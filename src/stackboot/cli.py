"""stackboot console shell

非交互式的展示层：DaemonOff 时按 --retries 自动重试，
用 rich 渲染阶段和最终结果，或输出 JSON 报告。
"""

import argparse
import asyncio
import sys

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from . import config
from .bootstrap import (
    BootstrapContext,
    BootstrapOrchestrator,
    BootstrapOutcome,
    BootstrapPhase,
    BootstrapResult,
    HostEnvironment,
    ReadinessSpec,
    RetryDecision,
)
from .report import BootstrapReport
from .telemetry import configure_logging

_PHASE_TEXT = {
    BootstrapPhase.PROBING: "Checking Docker...",
    BootstrapPhase.AWAITING_DECISION: "Docker is not running",
    BootstrapPhase.LAUNCHING: "Starting Docker stack (docker compose up -d)...",
    BootstrapPhase.POLLING: "Waiting for the web server...",
}


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="stackboot",
        description="Start the local Docker stack and wait until it answers",
    )
    p.add_argument("--url", default=config.APP_URL, help="Readiness URL")
    p.add_argument(
        "--timeout", type=float, default=config.READINESS_TIMEOUT_SECONDS,
        help="Readiness timeout in seconds",
    )
    p.add_argument(
        "--interval", type=float, default=config.READINESS_INTERVAL_SECONDS,
        help="Readiness poll interval in seconds",
    )
    p.add_argument(
        "--retries", type=int, default=config.DEFAULT_RETRIES,
        help="Retries while the Docker daemon is not running",
    )
    p.add_argument(
        "--retry-delay", type=float, default=config.DEFAULT_RETRY_DELAY_SECONDS,
        help="Seconds to wait before each retry",
    )
    p.add_argument("--no-pull", action="store_true", help="Skip docker compose pull")
    p.add_argument("--json", action="store_true", help="Print the report as JSON")
    p.add_argument("--log-level", default=config.LOG_LEVEL)
    return p


class AutoRetryDecider:
    """DaemonOff 决策：前 retries 次等待后重试，之后放弃"""

    def __init__(self, retries: int, delay: float, console: Console | None = None):
        self.retries = retries
        self.delay = delay
        self._console = console

    async def __call__(self, outcome: BootstrapOutcome, occurrence: int) -> RetryDecision:
        if occurrence > self.retries:
            return RetryDecision.QUIT
        if self._console is not None:
            self._console.print(
                f"[yellow]{outcome.message}[/] Retrying in {self.delay:.0f}s "
                f"({occurrence}/{self.retries})"
            )
        await asyncio.sleep(self.delay)
        return RetryDecision.RETRY


def render_result(console: Console, result: BootstrapResult) -> None:
    outcome = result.outcome
    body = Text(outcome.message)
    if outcome.detail:
        body.append(f"\n{outcome.detail}", style="dim")
    if result.launch is not None and not result.launch.ok:
        output = (result.launch.stderr or result.launch.stdout).strip()
        if output:
            body.append(f"\n\n{output}", style="red")
    if result.error:
        body.append(f"\n\n{result.error}", style="red")
    if result.ok and result.url:
        body.append(f"\n{result.url}", style="bold")
    console.print(
        Panel(body, title=outcome.title, border_style="green" if result.ok else "red")
    )


async def run(args: argparse.Namespace, console: Console) -> BootstrapResult:
    def on_phase(phase: BootstrapPhase) -> None:
        text = _PHASE_TEXT.get(phase)
        if text and not args.json:
            console.print(f"[cyan]{text}[/]")

    context = BootstrapContext(
        host=HostEnvironment.detect(),
        readiness=ReadinessSpec(url=args.url, timeout=args.timeout, interval=args.interval),
        decide=AutoRetryDecider(
            args.retries, args.retry_delay, console=None if args.json else console
        ),
        on_phase=on_phase,
        pull=not args.no_pull,
    )
    return await BootstrapOrchestrator().run(context)


def main(argv: list[str] | None = None) -> int:
    """入口函数"""
    args = build_parser().parse_args(argv)
    console = Console()
    configure_logging(args.log_level)

    try:
        result = asyncio.run(run(args, console))
    except ValueError as e:
        console.print(f"[red]{e}[/]")
        return 2
    except KeyboardInterrupt:
        console.print("\nInterrupted")
        return 130

    if args.json:
        print(BootstrapReport.from_result(result).model_dump_json(indent=2))
    else:
        render_result(console, result)
    return 0 if result.ok else 1


if __name__ == "__main__":
    sys.exit(main())
