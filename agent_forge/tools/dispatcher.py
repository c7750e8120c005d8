"""
Tool Dispatcher - the fixed table of named operations.

Each tool validates its argument bag, calls the registry and/or the LLM
gateway, and returns its result as JSON text. Failures come back as error
results carrying the message; nothing is retried.

Architecture:
    Transport (MCP stdio / HTTP) → ToolDispatcher → AgentRegistry / LLMGateway
"""

import json
import logging
from typing import Optional, Dict, List, Any, Callable, Awaitable

from ..agents import AgentRegistry, answer
from ..errors import ForgeError, ValidationError, NotFoundError, UpstreamError
from ..llm import LLMGateway
from .specs import ParamSpec, ToolSpec, PromptSpec, ToolResult, PromptResult
from .templates import DEFAULT_ROUNDS, expert_persona_messages, discussion_protocol_messages

logger = logging.getLogger("agent-forge.tools")


# =============================================================================
# Static tables
# =============================================================================

AGENT_ID = ParamSpec("agent_id", "string", required=True, description="Agent ID returned by create_agent")

TOOLS: List[ToolSpec] = [
    ToolSpec(
        name="create_agent",
        description="Create a new agent and generate its personality",
        params=[
            ParamSpec("agent_name", "string", required=True, description="Agent name"),
            ParamSpec("core_traits", "string", required=True, description="Core traits"),
        ],
    ),
    ToolSpec(
        name="agent_answer",
        description=(
            "Have an agent answer in character.\n"
            "Arguments:\n"
            "- agent_id: ID returned when the agent was created\n"
            "- context: the conversation so far, including the user's question and "
            "clarifications, other experts' views, the agent's own earlier statements, "
            "and any outside search or knowledge input\n"
            "- planned_rounds: estimated number of answers needed\n"
            "- current_round: answers given so far\n"
            "- need_more_rounds: true when the moderator wants extra rounds"
        ),
        params=[
            AGENT_ID,
            ParamSpec("context", "string", description="Conversation context"),
            ParamSpec("planned_rounds", "number", description="Planned number of answers"),
            ParamSpec("current_round", "number", description="Answers given so far"),
            ParamSpec("need_more_rounds", "boolean", description="Whether more rounds are needed"),
        ],
    ),
    ToolSpec(
        name="get_agent",
        description="Get the record of one agent",
        params=[AGENT_ID],
    ),
    ToolSpec(
        name="list_agents",
        description="List all agents",
    ),
    ToolSpec(
        name="delete_agent",
        description="Delete an agent",
        params=[ParamSpec("agent_id", "string", required=True, description="ID of the agent to delete")],
    ),
    ToolSpec(
        name="update_agent",
        description="Update an agent's name and/or core traits (new traits regenerate the personality)",
        params=[
            AGENT_ID,
            ParamSpec("name", "string", description="New agent name"),
            ParamSpec("core_traits", "string", description="New core traits"),
        ],
    ),
]

# Earlier published name of create_agent
TOOL_ALIASES = {"expert_personality_generation": "create_agent"}

PROMPTS: List[PromptSpec] = [
    PromptSpec(
        name="expert_persona",
        description="Prompt for writing an expert persona from a name and core traits",
        params=[
            ParamSpec("expert_name", required=True, description="Expert name"),
            ParamSpec("core_traits", required=True, description="Core traits"),
            ParamSpec("domain", description="Field of expertise"),
        ],
    ),
    PromptSpec(
        name="discussion_protocol",
        description="Moderator protocol for a multi-round discussion between agents",
        params=[
            ParamSpec("topic", required=True, description="Discussion topic"),
            ParamSpec("experts", description="Comma-separated experts to invite"),
            ParamSpec("rounds", description=f"Planned rounds (default {DEFAULT_ROUNDS})"),
        ],
    ),
]


# =============================================================================
# Argument extraction
# =============================================================================

def require_string(arguments: Dict[str, Any], key: str) -> str:
    value = arguments.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{key} must be a non-empty string")
    return value


def optional_string(arguments: Dict[str, Any], key: str, default: str = "") -> str:
    value = arguments.get(key)
    return value if isinstance(value, str) else default


def optional_number(arguments: Dict[str, Any], key: str, default: float = 0):
    value = arguments.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    return value


def optional_bool(arguments: Dict[str, Any], key: str, default: bool = False) -> bool:
    value = arguments.get(key)
    return value if isinstance(value, bool) else default


def to_json(result: Any) -> str:
    try:
        return json.dumps(result, ensure_ascii=False)
    except (TypeError, ValueError) as e:
        raise UpstreamError(f"marshal response failed: {e}")


# =============================================================================
# Dispatcher
# =============================================================================

Handler = Callable[[Dict[str, Any]], Awaitable[Any]]


class ToolDispatcher:
    """
    Routes named tool calls and prompt requests.

    Usage:
        dispatcher = ToolDispatcher(registry, gateway)
        result = await dispatcher.call_tool("create_agent", {
            "agent_name": "Socrates", "core_traits": "curious,questioning",
        })
        if result.success:
            payload = json.loads(result.text)
    """

    def __init__(self, registry: AgentRegistry, gateway: LLMGateway):
        self.registry = registry
        self.gateway = gateway

        self._tools: Dict[str, ToolSpec] = {t.name: t for t in TOOLS}
        self._prompts: Dict[str, PromptSpec] = {p.name: p for p in PROMPTS}
        self._handlers: Dict[str, Handler] = {
            "create_agent": self._create_agent,
            "agent_answer": self._agent_answer,
            "get_agent": self._get_agent,
            "list_agents": self._list_agents,
            "delete_agent": self._delete_agent,
            "update_agent": self._update_agent,
        }

        # Stats
        self.calls_total = 0
        self.calls_failed = 0

    def list_tools(self) -> List[ToolSpec]:
        return list(self._tools.values())

    def list_prompts(self) -> List[PromptSpec]:
        return list(self._prompts.values())

    def resolve(self, name: str) -> Optional[str]:
        """Canonical tool name, or None when unknown."""
        name = TOOL_ALIASES.get(name, name)
        return name if name in self._handlers else None

    async def call_tool(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> ToolResult:
        """Call a tool and return its JSON result or the error message."""
        arguments = arguments or {}
        self.calls_total += 1

        tool = self.resolve(name)
        if tool is None:
            self.calls_failed += 1
            logger.warning(f"Unknown tool: {name}")
            return ToolResult(success=False, error=f"unknown tool: {name}", error_type="UnknownTool")

        try:
            result = await self._handlers[tool](arguments)
            return ToolResult(success=True, text=to_json(result))
        except ForgeError as e:
            self.calls_failed += 1
            if isinstance(e, UpstreamError):
                logger.error(f"Tool {tool} failed: {e.message}")
            else:
                logger.warning(f"Tool {tool} rejected: {e.message}")
            return ToolResult(success=False, error=e.message, error_type=type(e).__name__)

    def get_prompt(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> PromptResult:
        """Render a prompt template."""
        arguments = arguments or {}
        spec = self._prompts.get(name)
        if spec is None:
            raise ValidationError(f"unknown prompt: {name}")

        if name == "expert_persona":
            messages = expert_persona_messages(
                require_string(arguments, "expert_name"),
                require_string(arguments, "core_traits"),
                optional_string(arguments, "domain") or None,
            )
        else:
            messages = discussion_protocol_messages(
                require_string(arguments, "topic"),
                optional_string(arguments, "experts") or None,
                self._parse_rounds(arguments.get("rounds")),
            )
        return PromptResult(description=spec.description, messages=messages)

    @staticmethod
    def _parse_rounds(value: Any) -> int:
        if value is None or value == "":
            return DEFAULT_ROUNDS
        # MCP prompt arguments arrive as strings; HTTP callers may send numbers
        if isinstance(value, bool):
            rounds = None
        elif isinstance(value, float):
            rounds = int(value) if value.is_integer() else None
        else:
            try:
                rounds = int(value)
            except (TypeError, ValueError):
                rounds = None
        if rounds is None or rounds < 1:
            raise ValidationError(f"rounds must be a positive integer, got {value!r}")
        return rounds

    def stats(self) -> Dict[str, Any]:
        return {
            "tools": len(self._tools),
            "prompts": len(self._prompts),
            "calls_total": self.calls_total,
            "calls_failed": self.calls_failed,
        }

    # =========================================================================
    # Handlers
    # =========================================================================

    async def _create_agent(self, arguments: Dict[str, Any]) -> Dict[str, Any]:
        agent = await self.registry.create(
            require_string(arguments, "agent_name"),
            require_string(arguments, "core_traits"),
        )
        return {
            "status": "success",
            "message": "agent created successfully",
            "agent_id": agent.id,
        }

    async def _get_agent(self, arguments: Dict[str, Any]) -> Dict[str, Any]:
        return self.registry.get(require_string(arguments, "agent_id")).to_dict()

    async def _list_agents(self, arguments: Dict[str, Any]) -> List[Dict[str, Any]]:
        return [a.to_dict() for a in self.registry.list()]

    async def _delete_agent(self, arguments: Dict[str, Any]) -> Dict[str, Any]:
        agent_id = require_string(arguments, "agent_id")
        self.registry.delete(agent_id)
        return {
            "status": "success",
            "message": f"agent {agent_id} deleted successfully",
        }

    async def _update_agent(self, arguments: Dict[str, Any]) -> Dict[str, Any]:
        agent = await self.registry.update(
            require_string(arguments, "agent_id"),
            name=optional_string(arguments, "name") or None,
            core_traits=optional_string(arguments, "core_traits") or None,
        )
        return {
            "status": "success",
            "message": "agent updated successfully",
            "agent": agent.to_dict(),
        }

    async def _agent_answer(self, arguments: Dict[str, Any]) -> Dict[str, Any]:
        result = await answer(
            self.registry,
            self.gateway,
            require_string(arguments, "agent_id"),
            context=optional_string(arguments, "context"),
            planned_rounds=optional_number(arguments, "planned_rounds"),
            current_round=optional_number(arguments, "current_round"),
            need_more_rounds=optional_bool(arguments, "need_more_rounds"),
        )
        return result.to_dict()
