"""stackboot 配置

配置分为以下几类：
- 运行时配置：容器运行时可执行文件与搜索路径
- Stack 配置：compose 文件的相对布局
- 子进程超时：probe / pull / up 各自的上限
- 就绪轮询配置：目标 URL、总超时、轮询间隔
- 日志与指标配置
"""

import os

# === 运行时配置 ===
RUNTIME_BINARY = os.environ.get("STACKBOOT_RUNTIME_BINARY", "docker")

# GUI-launched processes on macOS often inherit a truncated PATH, so these
# directories are searched after PATH.
_DEFAULT_SEARCH_DIRS = [
    "/usr/local/bin",
    "/opt/homebrew/bin",
    "/usr/bin",
    "/Applications/Docker.app/Contents/Resources/bin",
]
RUNTIME_SEARCH_DIRS = [
    d
    for d in os.environ.get(
        "STACKBOOT_RUNTIME_PATH", os.pathsep.join(_DEFAULT_SEARCH_DIRS)
    ).split(os.pathsep)
    if d
]

# === Stack 配置 ===
COMPOSE_DIR = "docker"
COMPOSE_FILE_NAME = "docker-compose.yml"
ARCHIVE_SUFFIXES = (".asar", ".pyz", ".zip")  # 打包模式下需要剥离的归档后缀

# === 子进程超时（秒）===
PROBE_TIMEOUT_SECONDS = 15.0  # docker info
PULL_TIMEOUT_SECONDS = 600.0  # docker compose pull
UP_TIMEOUT_SECONDS = 300.0  # docker compose up -d

# === 就绪轮询配置 ===
APP_URL = os.environ.get("STACKBOOT_APP_URL", "http://localhost:3000")
READINESS_TIMEOUT_SECONDS = 60.0  # 总等待时间
READINESS_INTERVAL_SECONDS = 2.0  # 轮询间隔
READINESS_REQUEST_TIMEOUT_SECONDS = 5.0  # 单次 HTTP 请求超时

# === Console shell 配置 ===
DEFAULT_RETRIES = 0  # DaemonOff 时自动重试次数
DEFAULT_RETRY_DELAY_SECONDS = 5.0

# === 日志配置 ===
LOG_LEVEL = os.environ.get("STACKBOOT_LOG_LEVEL", "INFO")
LOG_MAX_OUTPUT_LEN = 2000  # 日志中子进程输出截断长度

# === 指标配置 ===
METRICS_ENABLED = True
