"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (TESTPLANE__SECTION__KEY)
3. Workspace YAML (.testplane/config.yaml)
4. Global YAML (~/.config/testplane/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    TESTPLANE__<SECTION>__<KEY>=<VALUE>

Examples:
    TESTPLANE__LOGGING__LEVEL=DEBUG
    TESTPLANE__RUNNER__COMMAND_LINE="--config vitest.ci.ts"
    TESTPLANE__WATCH__API_PORT=51205
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration."""

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        TESTPLANE__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG logs every reporting-channel event.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class RunnerConfig(BaseModel):
    """One-shot runner configuration.

    Env vars:
        TESTPLANE__RUNNER__VITEST_PATH: Explicit path to the vitest executable
        TESTPLANE__RUNNER__COMMAND_LINE: Extra arguments appended to batch runs
        TESTPLANE__RUNNER__TIMEOUT_SEC: Batch run timeout
    """

    vitest_path: str | None = Field(
        default=None,
        description="Explicit vitest executable. Default: node_modules/.bin/vitest "
        "searched upward from the workspace root, then PATH.",
    )
    env: dict[str, str] | None = Field(
        default=None,
        description="Environment overrides applied to the batch invocation.",
    )
    command_line: str | None = Field(
        default=None,
        description="Extra raw command line, split on whitespace, appended to batch runs only.",
    )
    timeout_sec: float = Field(
        default=600.0,
        description="Batch run timeout. The process is killed when exceeded.",
    )

    @field_validator("timeout_sec")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"Timeout must be positive, got {v}")
        return v

    def extra_args(self) -> list[str] | None:
        if not self.command_line or not self.command_line.strip():
            return None
        return self.command_line.split()


class WatchConfig(BaseModel):
    """Watch-mode configuration.

    Env vars:
        TESTPLANE__WATCH__API_HOST: Host of the runner's API server
        TESTPLANE__WATCH__API_PORT: Port of the runner's API server
        TESTPLANE__WATCH__CONNECT_RETRIES: Connection attempts while the process boots
        TESTPLANE__WATCH__CALL_TIMEOUT_SEC: How long to wait for an RPC reply
    """

    api_host: str = Field(default="localhost", description="Runner API server host.")
    api_port: int = Field(default=51204, description="Runner API server port.")
    connect_retries: int = Field(
        default=20,
        description="Connection attempts before giving up on the reporting channel.",
    )
    connect_retry_delay_sec: float = Field(
        default=0.5,
        description="Delay between reporting-channel connection attempts.",
    )
    call_timeout_sec: float = Field(
        default=30.0,
        gt=0,
        description="Seconds to wait for the runner to answer an RPC call.",
    )

    @field_validator("api_port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        if not (0 <= v <= 65535):
            raise ValueError(f"Port must be 0-65535, got {v}")
        return v

    @property
    def api_url(self) -> str:
        return f"ws://{self.api_host}:{self.api_port}/__vitest_api__"


class DebugConfig(BaseModel):
    """Debug-mode configuration.

    Env vars:
        TESTPLANE__DEBUG__OUTPUT_WAIT_SEC: How long to wait for the JSON output after detach
    """

    output_wait_sec: float = Field(
        default=2.0,
        description="How long to poll for the debug run's JSON output file after the "
        "debugger detaches.",
    )
    output_poll_interval_sec: float = Field(
        default=0.1,
        description="Polling interval while waiting for the JSON output file.",
    )
    inspect_port: int = Field(
        default=9229,
        description="Inspector port passed to node --inspect.",
    )


class TestPlaneConfig(BaseModel):
    """Root configuration for TestPlane."""

    __test__ = False

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    runner: RunnerConfig = Field(default_factory=RunnerConfig)
    watch: WatchConfig = Field(default_factory=WatchConfig)
    debug: DebugConfig = Field(default_factory=DebugConfig)
