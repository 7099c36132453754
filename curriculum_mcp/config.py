"""Configuration for the curriculum MCP server: curriculum.toml ``[mcp]`` plus ENV."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field, fields
import os
from pathlib import Path
import tomllib
from typing import Any

LOG_LEVELS = ("debug", "info", "warning", "error")


def _env_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class ServerConfig:
    """Transport and log level for the server process."""

    transport: str = "stdio"
    log_level: str = "info"

    def validate(self) -> None:
        if self.transport != "stdio":
            raise ValueError(f"Invalid transport: {self.transport} (only stdio is supported)")
        if self.log_level.lower() not in LOG_LEVELS:
            raise ValueError(f"Invalid log_level: {self.log_level}")


@dataclass
class StoreConfig:
    """Where the JSON datastore lives and how it is written."""

    path: str = "data/db.json"
    indent: int = 2

    def validate(self) -> None:
        if not self.path:
            raise ValueError("store path must not be empty")
        if self.indent < 0:
            raise ValueError(f"store indent must not be negative, got {self.indent}")

    def resolved_path(self) -> Path:
        """Relative paths resolve against the working directory."""
        return Path(self.path).expanduser().resolve()


@dataclass
class ObservabilityConfig:
    """Structured logging, call metrics and the CSV call audit."""

    enabled: bool = False
    log_format: str = "json"  # json | text
    log_level: str = "info"
    include_correlation_id: bool = True
    csv_audit_enabled: bool = False
    csv_path: str = "./artifacts/tool_audit.csv"

    def validate(self) -> None:
        if self.log_format not in ("json", "text"):
            raise ValueError(f"Invalid log_format: {self.log_format}")
        if self.log_level.lower() not in LOG_LEVELS:
            raise ValueError(f"Invalid observability log_level: {self.log_level}")
        if self.enabled and self.csv_audit_enabled:
            csv_path = Path(self.csv_path)
            if csv_path.exists() and not csv_path.is_file():
                raise ValueError(f"Audit CSV path '{self.csv_path}' exists but is not a file")


@dataclass
class McpConfig:
    enabled: bool = True
    server: ServerConfig = field(default_factory=ServerConfig)
    store: StoreConfig = field(default_factory=StoreConfig)
    observability: ObservabilityConfig = field(default_factory=ObservabilityConfig)

    def validate(self) -> None:
        for section in (self.server, self.store, self.observability):
            section.validate()


SECTIONS = ("server", "store", "observability")

# ENV name -> (section or None for the root, attribute, parser)
ENV_OVERRIDES: dict[str, tuple[str | None, str, Callable[[str], Any]]] = {
    "CURRICULUM_MCP_ENABLED": (None, "enabled", _env_bool),
    "CURRICULUM_MCP_LOG_LEVEL": ("server", "log_level", str),
    "CURRICULUM_MCP_DB_PATH": ("store", "path", str),
    "CURRICULUM_MCP_OBS_ENABLED": ("observability", "enabled", _env_bool),
    "CURRICULUM_MCP_OBS_LOG_FORMAT": ("observability", "log_format", str),
    "CURRICULUM_MCP_OBS_CSV_ENABLED": ("observability", "csv_audit_enabled", _env_bool),
    "CURRICULUM_MCP_OBS_CSV_PATH": ("observability", "csv_path", str),
}


def _apply_toml(cfg: McpConfig, data: dict[str, Any]) -> None:
    """Copy known keys of the ``[mcp]`` table onto ``cfg``. Unknown keys are ignored."""
    table = data.get("mcp", {})
    if "enabled" in table:
        cfg.enabled = table["enabled"]
    for name in SECTIONS:
        section = getattr(cfg, name)
        values = table.get(name, {})
        for f in fields(section):
            if f.name in values:
                setattr(section, f.name, values[f.name])


def _apply_env_overrides(cfg: McpConfig) -> None:
    for env_name, (section_name, attr, parse) in ENV_OVERRIDES.items():
        raw = os.getenv(env_name)
        if not raw:
            continue
        target = cfg if section_name is None else getattr(cfg, section_name)
        setattr(target, attr, parse(raw))


def load_config(config_path: str | Path | None = None) -> McpConfig:
    """
    Build the effective config. Precedence: ENV > TOML > defaults.

    ``config_path`` defaults to ``$CURRICULUM_MCP_CONFIG``, then
    ``./curriculum.toml``; a missing file means defaults. Raises ValueError
    on invalid values.
    """
    if config_path is None:
        config_path = os.getenv("CURRICULUM_MCP_CONFIG") or "curriculum.toml"
    path = Path(config_path)

    cfg = McpConfig()
    if path.exists():
        with open(path, "rb") as f:
            _apply_toml(cfg, tomllib.load(f))
    _apply_env_overrides(cfg)
    cfg.validate()
    return cfg
