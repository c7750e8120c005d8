"""Prompt text used when generating and role-playing agents."""

from .models import Agent

PERSONA_SYSTEM_PROMPT = (
    "You are an expert persona generator. Based on the agent's name and core "
    "traits, write a system prompt that describes an expert persona. "
    "Return only the prompt, with no other content."
)


def persona_question(name: str, core_traits: str) -> str:
    return (
        f"Write a personality description for the agent named [{name}]. "
        f"Its core traits are: [{core_traits}]"
    )


def roleplay_system_prompt(agent: Agent) -> str:
    return f"You are now role-playing {agent.name}. {agent.personality}"
