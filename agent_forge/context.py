"""
Process context.

Everything a transport needs, built once at startup and passed explicitly.
"""

from dataclasses import dataclass
from typing import Optional

import httpx

from .config import ForgeConfig
from .llm import LLMGateway
from .agents import AgentRegistry
from .tools import ToolDispatcher


@dataclass
class ForgeContext:
    config: ForgeConfig
    gateway: LLMGateway
    registry: AgentRegistry
    dispatcher: ToolDispatcher

    @classmethod
    def from_config(
        cls,
        config: ForgeConfig,
        gateway: Optional[LLMGateway] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "ForgeContext":
        gateway = gateway or LLMGateway.from_config(config.deepseek, transport=transport)
        registry = AgentRegistry(gateway)
        return cls(
            config=config,
            gateway=gateway,
            registry=registry,
            dispatcher=ToolDispatcher(registry, gateway),
        )

    async def aclose(self):
        await self.gateway.aclose()
