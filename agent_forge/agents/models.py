"""
Agent Registry Models

Pydantic models for agent records and simulated answers.
"""

from datetime import datetime, timezone
from typing import Dict, Any, Union
from pydantic import BaseModel, Field


def utc_timestamp() -> str:
    """RFC 3339 timestamp, second precision."""
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


class Agent(BaseModel):
    """A role-play agent held in process memory."""
    id: str = Field(..., description="Server-generated unique identifier")
    name: str = Field(..., description="Display name")
    core_traits: str = Field(..., description="Traits the personality is generated from")
    personality: str = Field("", description="Generated persona text")
    created_at: str = Field(default_factory=utc_timestamp)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for JSON serialization."""
        return {
            "id": self.id,
            "name": self.name,
            "core_traits": self.core_traits,
            "personality": self.personality,
            "created_at": self.created_at,
        }


class AnswerResult(BaseModel):
    """Reply from a simulated agent plus the round bookkeeping echoed back."""
    content: str
    planned_rounds: Union[int, float] = 0
    current_round: Union[int, float] = 0
    need_more_rounds: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "content": self.content,
            "planned_rounds": self.planned_rounds,
            "current_round": self.current_round,
            "need_more_rounds": self.need_more_rounds,
        }
