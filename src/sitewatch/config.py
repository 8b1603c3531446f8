"""Layered configuration: .sitewatch/config.toml -> SITEWATCH_* env vars -> defaults."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

try:
    import tomllib  # 3.11+
except ModuleNotFoundError:
    import tomli as tomllib  # type: ignore[no-redef]

DEFAULT_TARGETS: tuple[str, ...] = (
    "https://zerojudge.tw/",
    "http://srlb.somee.com/",
    "http://example.com/404",
    "http://10.255.255.1",
    "http://httpstat.us/403",
    "http://httpstat.us/502",
)

_TRUTHY = {"1", "true", "yes", "on"}
_NO_TIMEOUT = {"", "none"}
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def _as_bool(value: object) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUTHY


def _as_targets(value: object) -> tuple[str, ...]:
    if isinstance(value, str):
        items = value.split(",")
    else:
        items = list(value)  # type: ignore[call-overload]
    return tuple(t.strip() for t in items if t and t.strip())


def _as_timeout(value: object) -> float | None:
    if value is None or str(value).strip().lower() in _NO_TIMEOUT:
        return None
    return float(value)  # type: ignore[arg-type]


def _as_level(value: object) -> str:
    level = str(value).strip().upper()
    if level not in LOG_LEVELS:
        raise ValueError(f"Unknown log level {value!r}; expected one of " + ", ".join(LOG_LEVELS))
    return level


@dataclass(frozen=True, slots=True)
class PollConfig:
    """Probe targets and cadence."""

    targets: tuple[str, ...] = DEFAULT_TARGETS
    interval_seconds: float = 10.0
    timeout_seconds: float | None = None  # None waits indefinitely
    follow_redirects: bool = True


@dataclass(frozen=True, slots=True)
class ServerConfig:
    """Dashboard HTTP server settings."""

    host: str = "0.0.0.0"
    port: int = 8080
    static_dir: str | None = None


@dataclass(frozen=True, slots=True)
class StoreConfig:
    """History file settings."""

    history_file: str = "status_history.json"


@dataclass(frozen=True, slots=True)
class LogConfig:
    """Probe log settings."""

    log_file: str = "website_monitor.log"
    level: str = "INFO"


@dataclass(frozen=True, slots=True)
class SitewatchConfig:
    """Top-level configuration container."""

    project_path: Path = field(default_factory=Path.cwd)
    poll: PollConfig = field(default_factory=PollConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    store: StoreConfig = field(default_factory=StoreConfig)
    log: LogConfig = field(default_factory=LogConfig)

    @property
    def state_dir(self) -> Path:
        return self.project_path / ".sitewatch"

    @property
    def history_path(self) -> Path:
        return self._resolve(self.store.history_file)

    @property
    def log_path(self) -> Path:
        return self._resolve(self.log.log_file)

    def _resolve(self, name: str) -> Path:
        path = Path(name)
        return path if path.is_absolute() else self.state_dir / path

    @classmethod
    def load(cls, project_path: Path | None = None) -> SitewatchConfig:
        """Load config with layering: TOML file -> env vars -> defaults."""
        project = Path(project_path) if project_path else Path.cwd()
        toml_path = project / ".sitewatch" / "config.toml"

        toml_data: dict = {}
        if toml_path.is_file():
            with open(toml_path, "rb") as f:
                toml_data = tomllib.load(f)

        poll_data = toml_data.get("poll", {})
        server_data = toml_data.get("server", {})
        store_data = toml_data.get("store", {})
        log_data = toml_data.get("log", {})

        # Use literal defaults (slots=True prevents class-level attribute access)
        _poll_defaults = PollConfig()
        _server_defaults = ServerConfig()
        _store_defaults = StoreConfig()
        _log_defaults = LogConfig()

        poll = PollConfig(
            targets=_as_targets(
                os.environ.get(
                    "SITEWATCH_TARGETS",
                    poll_data.get("targets", _poll_defaults.targets),
                )
            ),
            interval_seconds=float(
                os.environ.get(
                    "SITEWATCH_INTERVAL",
                    poll_data.get("interval_seconds", _poll_defaults.interval_seconds),
                )
            ),
            timeout_seconds=_as_timeout(
                os.environ.get(
                    "SITEWATCH_TIMEOUT",
                    poll_data.get("timeout_seconds", _poll_defaults.timeout_seconds),
                )
            ),
            follow_redirects=_as_bool(
                os.environ.get(
                    "SITEWATCH_FOLLOW_REDIRECTS",
                    poll_data.get("follow_redirects", _poll_defaults.follow_redirects),
                )
            ),
        )

        server = ServerConfig(
            host=os.environ.get(
                "SITEWATCH_HOST",
                server_data.get("host", _server_defaults.host),
            ),
            port=int(
                os.environ.get(
                    "SITEWATCH_PORT",
                    server_data.get("port", _server_defaults.port),
                )
            ),
            static_dir=os.environ.get(
                "SITEWATCH_STATIC_DIR",
                server_data.get("static_dir", _server_defaults.static_dir),
            ),
        )

        store = StoreConfig(
            history_file=os.environ.get(
                "SITEWATCH_HISTORY_FILE",
                store_data.get("history_file", _store_defaults.history_file),
            ),
        )

        log = LogConfig(
            log_file=os.environ.get(
                "SITEWATCH_LOG_FILE",
                log_data.get("log_file", _log_defaults.log_file),
            ),
            level=_as_level(
                os.environ.get(
                    "SITEWATCH_LOG_LEVEL",
                    log_data.get("level", _log_defaults.level),
                )
            ),
        )

        return cls(
            project_path=project,
            poll=poll,
            server=server,
            store=store,
            log=log,
        )
