"""Stack 定义文件位置解析

开发模式下以当前工作目录为基准；打包模式下以应用安装目录为基准，
并剥离归档文件（如 app.asar、*.pyz）这一层。
"""

import sys
from dataclasses import dataclass, field
from pathlib import Path

from .. import config
from .types import StackTarget


@dataclass(frozen=True)
class HostEnvironment:
    """宿主应用的运行状态（由调用方注入）

    Attributes:
        cwd: 进程工作目录
        development: 是否处于开发模式
        packaged: 是否为打包后的应用
        app_path: 打包应用的根路径（可能指向归档文件）
    """

    cwd: Path = field(default_factory=Path.cwd)
    development: bool = False
    packaged: bool = False
    app_path: Path | None = None

    @classmethod
    def detect(cls, development: bool | None = None) -> "HostEnvironment":
        """从当前解释器推断运行状态

        冻结（PyInstaller 等）的可执行文件视为打包模式，
        应用路径为可执行文件所在目录；否则视为开发模式。
        """
        frozen = bool(getattr(sys, "frozen", False))
        if development is None:
            development = not frozen
        app_path = Path(sys.executable).resolve().parent if frozen else None
        return cls(
            cwd=Path.cwd(),
            development=development,
            packaged=frozen,
            app_path=app_path,
        )


def strip_archive(path: Path) -> Path:
    """路径末尾是归档文件时返回其所在目录"""
    if path.name.endswith(config.ARCHIVE_SUFFIXES):
        return path.parent
    return path


def resolve_base_dir(host: HostEnvironment) -> Path:
    if host.development:
        return host.cwd
    if host.packaged and host.app_path is not None:
        return strip_archive(host.app_path)
    return host.cwd


def resolve_stack_target(host: HostEnvironment) -> StackTarget:
    """解析 compose 文件路径和执行目录

    Args:
        host: 宿主运行状态

    Returns:
        StackTarget: base/docker/docker-compose.yml，执行目录为 cwd
    """
    base = resolve_base_dir(host)
    return StackTarget(
        compose_file=base / config.COMPOSE_DIR / config.COMPOSE_FILE_NAME,
        working_dir=host.cwd,
    )
