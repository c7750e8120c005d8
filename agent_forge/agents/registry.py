"""
Agent Forge Agent Registry

Core registry logic: create, read, list, update and delete agents.
Personalities are generated through the LLM gateway.
"""

import uuid
import logging
import threading
from typing import Optional, List, Dict, Any

from ..errors import ValidationError, NotFoundError
from ..llm import LLMGateway
from .models import Agent
from .prompts import PERSONA_SYSTEM_PROMPT, persona_question

logger = logging.getLogger("agent-forge.agents.registry")


class AgentRegistry:
    """
    In-memory agent registry.

    Records live only as long as the process. Every access to the map goes
    through ``_lock``; the lock is never held while waiting on the gateway.
    Stored ``Agent`` objects are replaced on update, never mutated, so a
    record handed to a caller is a stable snapshot.
    """

    def __init__(self, gateway: LLMGateway):
        self.gateway = gateway
        self._agents: Dict[str, Agent] = {}
        self._lock = threading.Lock()

    # =========================================================================
    # Agent CRUD
    # =========================================================================

    async def create(self, name: str, core_traits: str) -> Agent:
        """Create a new agent with a freshly generated personality."""
        name = name or ""
        core_traits = core_traits or ""
        if not name.strip():
            raise ValidationError("agent name must not be empty")
        if not core_traits.strip():
            raise ValidationError("core traits must not be empty")

        logger.info(f"Creating agent {name!r}", extra={"traits": core_traits})
        personality = await self._generate_personality(name, core_traits)

        with self._lock:
            agent_id = str(uuid.uuid4())
            while agent_id in self._agents:
                agent_id = str(uuid.uuid4())
            agent = Agent(
                id=agent_id,
                name=name,
                core_traits=core_traits,
                personality=personality,
            )
            self._agents[agent_id] = agent

        logger.info(f"Created agent: {agent_id} ({name})")
        return agent

    def get(self, agent_id: str) -> Agent:
        """Get an agent by ID."""
        with self._lock:
            agent = self._agents.get(agent_id)
        if agent is None:
            raise NotFoundError(agent_id)
        return agent

    def list(self) -> List[Agent]:
        """List all agents. Order is not significant."""
        with self._lock:
            return list(self._agents.values())

    async def update(
        self,
        agent_id: str,
        name: Optional[str] = None,
        core_traits: Optional[str] = None,
    ) -> Agent:
        """
        Update name and/or core traits.

        Blank (empty or whitespace-only) values leave the field unchanged.
        A traits change regenerates the personality. The update is
        all-or-nothing: if regeneration fails nothing is written.
        """
        current = self.get(agent_id)

        changes: Dict[str, Any] = {}
        if name and name.strip():
            changes["name"] = name
        if core_traits and core_traits.strip():
            changes["core_traits"] = core_traits
            changes["personality"] = await self._generate_personality(
                changes.get("name", current.name), core_traits
            )

        if not changes:
            return current

        with self._lock:
            stored = self._agents.get(agent_id)
            if stored is None:
                # Deleted while the personality was being generated
                raise NotFoundError(agent_id)
            updated = stored.model_copy(update=changes)
            self._agents[agent_id] = updated

        logger.info(f"Updated agent: {agent_id}", extra={"fields": sorted(changes)})
        return updated

    def delete(self, agent_id: str) -> None:
        """Delete an agent."""
        with self._lock:
            if self._agents.pop(agent_id, None) is None:
                raise NotFoundError(agent_id)
        logger.info(f"Deleted agent: {agent_id}")

    # =========================================================================
    # Helpers
    # =========================================================================

    async def _generate_personality(self, name: str, core_traits: str) -> str:
        return await self.gateway.complete(
            PERSONA_SYSTEM_PROMPT, persona_question(name, core_traits)
        )

    def __len__(self) -> int:
        with self._lock:
            return len(self._agents)

    def __contains__(self, agent_id: object) -> bool:
        with self._lock:
            return agent_id in self._agents

    def stats(self) -> Dict[str, Any]:
        """Get registry statistics."""
        return {"agents": len(self)}
