"""Pytest configuration and fixtures for Agent Forge tests."""

import logging

import pytest

from agent_forge.config import ForgeConfig
from agent_forge.logs import ROOT_LOGGER
from agent_forge.agents import AgentRegistry
from agent_forge.context import ForgeContext
from agent_forge.tools import ToolDispatcher


class StubGateway:
    """Stands in for LLMGateway; records every call."""

    def __init__(self, replies=None, error=None):
        self.replies = list(replies or [])
        self.error = error
        self.calls = []
        self.closed = False

    async def complete(self, system_prompt, user_question, background_context=""):
        self.calls.append((system_prompt, user_question, background_context))
        if self.error is not None:
            raise self.error
        if self.replies:
            return self.replies.pop(0)
        return f"personality #{len(self.calls)}"

    async def aclose(self):
        self.closed = True


@pytest.fixture
def gateway() -> StubGateway:
    return StubGateway()


@pytest.fixture
def registry(gateway) -> AgentRegistry:
    return AgentRegistry(gateway)


@pytest.fixture
def dispatcher(registry, gateway) -> ToolDispatcher:
    return ToolDispatcher(registry, gateway)


@pytest.fixture
def context(gateway) -> ForgeContext:
    return ForgeContext.from_config(ForgeConfig(), gateway=gateway)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every AGENT_FORGE_* / DEEPSEEK_API_KEY variable."""
    import os

    for var in list(os.environ):
        if var.startswith("AGENT_FORGE_") or var == "DEEPSEEK_API_KEY":
            monkeypatch.delenv(var, raising=False)
    return monkeypatch


@pytest.fixture(autouse=True)
def reset_logger():
    """Drop handlers installed by setup_logging so they never outlive a test."""
    yield
    root = logging.getLogger(ROOT_LOGGER)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    root.propagate = True
