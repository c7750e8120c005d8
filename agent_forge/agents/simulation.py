"""
Answer simulation.

Has a registered agent reply to the current discussion context in
character. Round counting is the caller's job; this only echoes the
bookkeeping back, raising ``planned_rounds`` when the caller has already
gone past it.
"""

import logging
from typing import Union

from ..llm import LLMGateway
from .models import AnswerResult
from .prompts import roleplay_system_prompt
from .registry import AgentRegistry

logger = logging.getLogger("agent-forge.agents.simulation")

Number = Union[int, float]


async def answer(
    registry: AgentRegistry,
    gateway: LLMGateway,
    agent_id: str,
    context: str = "",
    planned_rounds: Number = 0,
    current_round: Number = 0,
    need_more_rounds: bool = False,
) -> AnswerResult:
    """Generate the agent's reply to ``context``."""
    agent = registry.get(agent_id)

    if current_round > planned_rounds:
        logger.debug(f"Raising planned rounds {planned_rounds} -> {current_round} for {agent_id}")
        planned_rounds = current_round

    content = await gateway.complete(roleplay_system_prompt(agent), context)

    return AnswerResult(
        content=content,
        planned_rounds=planned_rounds,
        current_round=current_round,
        need_more_rounds=need_more_rounds,
    )
