"""Telemetry - 统一日志和指标入口

提供统一的日志工厂、console 日志配置和 bootstrap 指标记录。

日志格式: [Component] msg
指标示例: probe.result, launch.result, readiness.attempts, bootstrap.outcome
"""

import logging
from collections import Counter

from rich.console import Console
from rich.logging import RichHandler

from . import config

_PROJECT_PREFIX = "stackboot"


def get_logger(name: str) -> logging.Logger:
    """获取带模块前缀的 logger

    Args:
        name: 模块名（通常使用 __name__）

    Returns:
        Logger 实例
    """
    return logging.getLogger(name)


def configure_logging(level: str | int = "INFO", console: Console | None = None) -> RichHandler:
    """为 console shell 安装 RichHandler

    只配置 stackboot 命名空间的 logger，不改动 root logger，
    以免影响宿主应用的日志配置。重复调用会替换之前安装的 handler。

    Args:
        level: 日志级别（名称或数值）
        console: 输出用的 rich Console，默认 stderr

    Returns:
        安装的 handler
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))

    logger = logging.getLogger(_PROJECT_PREFIX)
    for existing in list(logger.handlers):
        if isinstance(existing, RichHandler):
            logger.removeHandler(existing)
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return handler


def truncate_output(text: str, limit: int) -> str:
    """截断子进程输出，保留尾部（错误信息通常在最后）"""
    if len(text) <= limit:
        return text
    return f"...{text[-limit:]}"


_MetricKey = tuple[str, tuple[tuple[str, str], ...]]


def _metric_key(name: str, labels: dict[str, str] | None) -> _MetricKey:
    return name, tuple(sorted((labels or {}).items()))


class Metrics:
    """Bootstrap 过程的内存指标

    计数器按 (name, labels) 累加，gauge 只保留最后一次的值。
    enabled=False 时记录调用为空操作，读取照常可用。
    """

    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self._counters: Counter[_MetricKey] = Counter()
        self._gauges: dict[_MetricKey, float] = {}

    def inc(self, name: str, labels: dict[str, str] | None = None, value: int = 1) -> None:
        if self.enabled:
            self._counters[_metric_key(name, labels)] += value

    def gauge(self, name: str, value: float, labels: dict[str, str] | None = None) -> None:
        if self.enabled:
            self._gauges[_metric_key(name, labels)] = value

    def get_counter(self, name: str, labels: dict[str, str] | None = None) -> int:
        return self._counters[_metric_key(name, labels)]

    def get_gauge(self, name: str, labels: dict[str, str] | None = None) -> float | None:
        return self._gauges.get(_metric_key(name, labels))

    def reset(self) -> None:
        self._counters.clear()
        self._gauges.clear()


metrics = Metrics(enabled=config.METRICS_ENABLED)
