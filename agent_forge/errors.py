"""
Agent Forge error taxonomy.

Every per-request failure is one of these; the dispatcher turns them into
failed tool results and the HTTP surface maps them to status codes.
"""

from typing import Optional


class ForgeError(Exception):
    """Base class for all Agent Forge errors."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ForgeError):
    """A required argument is missing, empty, or of the wrong type."""

    status_code = 400


class NotFoundError(ForgeError):
    """No agent is registered under the requested id."""

    status_code = 404

    def __init__(self, agent_id: str, message: Optional[str] = None):
        super().__init__(message or f"agent with ID {agent_id} not found")
        self.agent_id = agent_id


class UpstreamError(ForgeError):
    """The chat-completion call failed or its result could not be serialized."""

    status_code = 502


class ConfigError(ForgeError):
    """Configuration could not be read or parsed (startup only)."""
