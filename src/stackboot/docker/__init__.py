"""Container runtime CLI adapter."""

from .client import CommandResult, DockerClient

__all__ = ["CommandResult", "DockerClient"]
