"""
Agent Forge Agent Registry

Manages agent lifecycle: create, update, delete, and simulated answers.
Agents are described by a name and core traits; their personality text is
generated by the LLM gateway.
"""

from .models import Agent, AnswerResult
from .registry import AgentRegistry
from .simulation import answer

__all__ = [
    "Agent",
    "AnswerResult",
    "AgentRegistry",
    "answer",
]
