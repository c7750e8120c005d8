"""
Tool and prompt descriptors.

Declared argument schemas for the dispatch table, rendered in the shape MCP
clients expect (``inputSchema`` for tools, ``arguments`` for prompts).
"""

from typing import Optional, Dict, List, Any
from dataclasses import dataclass, field


@dataclass
class ParamSpec:
    """One declared argument."""
    name: str
    type: str = "string"  # string | number | boolean
    required: bool = False
    description: str = ""

    def to_schema(self) -> Dict[str, Any]:
        return {"type": self.type, "description": self.description}


@dataclass
class ToolSpec:
    """Representation of a dispatchable tool."""
    name: str
    description: str = ""
    params: List[ParamSpec] = field(default_factory=list)

    @property
    def input_schema(self) -> Dict[str, Any]:
        return {
            "type": "object",
            "properties": {p.name: p.to_schema() for p in self.params},
            "required": [p.name for p in self.params if p.required],
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }


@dataclass
class PromptSpec:
    """Representation of a prompt template. Prompt arguments are always strings."""
    name: str
    description: str = ""
    params: List[ParamSpec] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "arguments": [
                {"name": p.name, "description": p.description, "required": p.required}
                for p in self.params
            ],
        }


@dataclass
class ToolResult:
    """Result from a tool call. ``text`` holds the JSON-serialized payload."""
    success: bool
    text: Optional[str] = None
    error: Optional[str] = None
    error_type: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "content": [{"type": "text", "text": self.text or self.error or ""}],
            "error": self.error,
            "isError": not self.success,
        }


@dataclass
class PromptResult:
    """Rendered prompt: a description plus role/content messages."""
    description: str
    messages: List[Dict[str, str]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"description": self.description, "messages": self.messages}
