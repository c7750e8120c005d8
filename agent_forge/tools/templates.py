"""
Prompt templates.

Canned multi-message prompts served alongside the tools. Pure string
formatting: nothing here touches the registry or the gateway.
"""

from typing import Dict, List, Optional

DEFAULT_ROUNDS = 3


def expert_persona_messages(
    expert_name: str,
    core_traits: str,
    domain: Optional[str] = None,
) -> List[Dict[str, str]]:
    """Ask the model to write a persona prompt for an expert."""
    field_line = f"Field of expertise: {domain}\n" if domain else ""
    return [
        {
            "role": "system",
            "content": (
                "You design expert personas for multi-agent discussions. "
                "A persona is a second-person system prompt that fixes the "
                "expert's background, way of reasoning, tone of voice and the "
                "questions they habitually ask. Return only the persona prompt."
            ),
        },
        {
            "role": "user",
            "content": (
                f"Expert name: {expert_name}\n"
                f"Core traits: {core_traits}\n"
                f"{field_line}"
                "Write the persona in under 300 words. Make the traits visible "
                "in how the expert argues, not just in adjectives."
            ),
        },
    ]


def discussion_protocol_messages(
    topic: str,
    experts: Optional[str] = None,
    rounds: int = DEFAULT_ROUNDS,
) -> List[Dict[str, str]]:
    """Moderator instructions for a round-based discussion between agents."""
    if experts:
        panel = (
            f"Create one agent per expert with `create_agent`: {experts}. "
            "Give each a short name and comma-separated core traits."
        )
    else:
        panel = (
            "Choose 2 to 4 experts whose views on the topic will genuinely "
            "differ, and create one agent per expert with `create_agent`."
        )

    return [
        {
            "role": "system",
            "content": (
                "You are the moderator of a panel of simulated experts. You do "
                "not give your own opinion; you steer the discussion, keep the "
                "round count, and write the final synthesis.\n\n"
                "Protocol:\n"
                f"1. Setup. {panel} Keep the returned agent_id values.\n"
                f"2. Plan. Start with planned_rounds = {rounds} and current_round = 0.\n"
                "3. Rounds. For each round, call `agent_answer` once per expert. "
                "Pass as context: the user's question and clarifications, the "
                "other experts' latest points, the expert's own earlier "
                "statements, and any outside material. Increment current_round "
                "after every expert has spoken.\n"
                "4. Extension. If the experts are still converging on something "
                "important after the planned rounds, set need_more_rounds = true "
                "and continue; the tool raises planned_rounds to match "
                "current_round for you.\n"
                "5. Close. Summarise agreements, open disagreements and a "
                "recommendation, then remove the panel with `delete_agent`."
            ),
        },
        {
            "role": "user",
            "content": f"Discussion topic: {topic}",
        },
    ]
