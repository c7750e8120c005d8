"""Tool and prompt dispatch table."""

from .specs import ParamSpec, ToolSpec, PromptSpec, ToolResult, PromptResult
from .dispatcher import ToolDispatcher, TOOLS, PROMPTS, TOOL_ALIASES

__all__ = [
    "ParamSpec",
    "ToolSpec",
    "PromptSpec",
    "ToolResult",
    "PromptResult",
    "ToolDispatcher",
    "TOOLS",
    "PROMPTS",
    "TOOL_ALIASES",
]
