"""
Agent Forge - agent registry and role-play tools over a chat-completion API

Two transports over one dispatch table:
1. MCP over stdio - for MCP-capable clients
2. HTTP API - FastAPI surface for everything else
"""

__version__ = "1.0.0"

from .config import ForgeConfig, load_config
from .errors import ForgeError, ValidationError, NotFoundError, UpstreamError, ConfigError

__all__ = [
    "__version__",
    "ForgeConfig",
    "load_config",
    "ForgeError",
    "ValidationError",
    "NotFoundError",
    "UpstreamError",
    "ConfigError",
]
