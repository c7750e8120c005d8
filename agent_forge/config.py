"""
Configuration management for Agent Forge.

Settings are layered, later layers winning:

1. Built-in defaults (the dataclasses below)
2. ``config.yaml`` (with ``${VAR}`` environment expansion)
3. ``AGENT_FORGE_<SECTION>_<KEY>`` environment variables
4. ``DEEPSEEK_API_KEY`` for the upstream API key
"""

import os
import re
import sys
import logging
from pathlib import Path
from dataclasses import dataclass, field, fields, asdict
from typing import Optional, Dict, List, Any, Mapping

import yaml

from .errors import ConfigError

logger = logging.getLogger("agent-forge.config")

ENV_PREFIX = "AGENT_FORGE"
API_KEY_ENV = "DEEPSEEK_API_KEY"
CONFIG_NAME = "config.yaml"


def executable_dir() -> Path:
    """Directory holding the running entry point."""
    if sys.argv and sys.argv[0]:
        return Path(sys.argv[0]).resolve().parent
    return Path.cwd()


@dataclass
class ServerConfig:
    """Listener settings. Rate limit keys are declared but not enforced."""
    host: str = "localhost"
    port: int = 8080
    rate_limit: int = 60  # requests per minute
    rate_limit_burst: int = 10
    shutdown_timeout: int = 30  # seconds


@dataclass
class DeepSeekConfig:
    """Upstream chat-completion API settings."""
    api_key: str = ""
    base_url: str = "https://api.deepseek.com"
    model: str = "deepseek-chat"
    temperature: float = 0.7
    timeout: int = 30  # seconds per call


@dataclass
class LogConfig:
    """Logging settings. File output is rotated when ``enabled``."""
    enabled: bool = False
    level: str = "info"
    file: str = field(
        default_factory=lambda: str(executable_dir() / "logs" / "agent-forge.log")
    )
    max_size: int = 100  # MB per file
    max_backups: int = 3
    max_age: int = 28  # days
    compress: bool = True


@dataclass
class ForgeConfig:
    """Root configuration for Agent Forge."""
    server: ServerConfig = field(default_factory=ServerConfig)
    deepseek: DeepSeekConfig = field(default_factory=DeepSeekConfig)
    log: LogConfig = field(default_factory=LogConfig)

    # Where the YAML layer came from, None when running on defaults
    source: Optional[str] = None

    def sections(self) -> Dict[str, Any]:
        return {"server": self.server, "deepseek": self.deepseek, "log": self.log}

    def to_dict(self, mask_secrets: bool = True) -> Dict[str, Any]:
        data = {name: asdict(section) for name, section in self.sections().items()}
        if mask_secrets and data["deepseek"]["api_key"]:
            data["deepseek"]["api_key"] = "***"
        return data


def expand_env_vars(value: Any) -> Any:
    """Recursively expand environment variables in config values."""
    if isinstance(value, str):
        # Match ${VAR} or $VAR patterns
        pattern = r'\$\{([^}]+)\}|\$([A-Za-z_][A-Za-z0-9_]*)'

        def replace(match):
            var_name = match.group(1) or match.group(2)
            return os.environ.get(var_name, match.group(0))

        return re.sub(pattern, replace, value)
    elif isinstance(value, dict):
        return {k: expand_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [expand_env_vars(v) for v in value]
    return value


def _coerce(key: str, value: Any, current: Any) -> Any:
    """Convert a raw YAML or environment value to the type of ``current``."""
    try:
        if isinstance(current, bool):
            if isinstance(value, str):
                lowered = value.strip().lower()
                if lowered in ("1", "true", "yes", "on"):
                    return True
                if lowered in ("0", "false", "no", "off", ""):
                    return False
                raise ValueError(value)
            return bool(value)
        if isinstance(current, int):
            return int(value)
        if isinstance(current, float):
            return float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"Invalid value for {key}: {value!r}")
    return "" if value is None else str(value)


def _apply_section(name: str, section: Any, data: Mapping[str, Any]) -> None:
    if not isinstance(data, Mapping):
        raise ConfigError(f"Section '{name}' must be a mapping")
    known = {f.name for f in fields(section)}
    for key, value in data.items():
        if key not in known:
            logger.warning(f"Ignoring unknown config key {name}.{key}")
            continue
        setattr(section, key, _coerce(f"{name}.{key}", value, getattr(section, key)))


def _apply_env(config: ForgeConfig, environ: Mapping[str, str]) -> None:
    for name, section in config.sections().items():
        for f in fields(section):
            var = f"{ENV_PREFIX}_{name}_{f.name}".upper()
            if var in environ:
                setattr(section, f.name, _coerce(var, environ[var], getattr(section, f.name)))

    api_key = environ.get(API_KEY_ENV)
    if api_key:
        config.deepseek.api_key = api_key


def search_paths(base_dir: Optional[Path] = None) -> List[Path]:
    """Candidate config files, in lookup order."""
    base = base_dir or executable_dir()
    cwd = Path.cwd()
    candidates = [
        base / CONFIG_NAME,
        base / "config" / CONFIG_NAME,
        cwd / CONFIG_NAME,
        cwd / "config" / CONFIG_NAME,
    ]
    unique = []
    for path in candidates:
        if path not in unique:
            unique.append(path)
    return unique


def find_config_file(base_dir: Optional[Path] = None) -> Optional[Path]:
    for path in search_paths(base_dir):
        if path.is_file():
            return path
    return None


def _read_yaml(path: Path) -> Dict[str, Any]:
    try:
        with open(path) as f:
            raw = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Failed to read config file {path}: {e}")
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse config file {path}: {e}")

    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return expand_env_vars(raw)


def load_config(
    path: Optional[str | Path] = None,
    environ: Optional[Mapping[str, str]] = None,
    base_dir: Optional[Path] = None,
) -> ForgeConfig:
    """
    Load configuration.

    An explicit ``path`` must exist. Without one, the standard locations are
    searched and defaults are used when nothing is found.
    """
    environ = os.environ if environ is None else environ
    config = ForgeConfig()

    if path is not None:
        config_file = Path(path)
        if not config_file.is_file():
            raise ConfigError(f"Config file not found: {config_file}")
    else:
        config_file = find_config_file(base_dir)

    if config_file is None:
        locations = ", ".join(str(p) for p in search_paths(base_dir))
        logger.warning(f"No config file found, using defaults (searched: {locations})")
    else:
        data = _read_yaml(config_file)
        sections = config.sections()
        for name, section_data in data.items():
            if name not in sections:
                logger.warning(f"Ignoring unknown config section '{name}'")
                continue
            _apply_section(name, sections[name], section_data or {})
        config.source = str(config_file)

    _apply_env(config, environ)
    return config


def create_default_config() -> str:
    """Generate default configuration YAML."""
    return """# Agent Forge Configuration

server:
  host: localhost
  port: 8080
  rate_limit: 60        # requests per minute (not enforced)
  rate_limit_burst: 10
  shutdown_timeout: 30

# OpenAI-compatible chat-completion endpoint
deepseek:
  # Leave empty and export DEEPSEEK_API_KEY instead
  api_key: ""
  base_url: https://api.deepseek.com
  model: deepseek-chat
  temperature: 0.7
  timeout: 30

log:
  enabled: false        # true: write to file instead of stderr
  level: info
  file: ./logs/agent-forge.log
  max_size: 100         # MB
  max_backups: 3
  max_age: 28           # days
  compress: true
"""
