"""
MCP stdio transport.

Publishes the dispatch table as MCP tools and prompts. The schemas come
straight from the static tables, so the low-level server is used rather
than decorator-derived signatures.
"""

import logging
from typing import Dict, List, Any, Optional

import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from .context import ForgeContext
from .errors import ForgeError

logger = logging.getLogger("agent-forge.stdio")

SERVER_NAME = "agent-forge"


class ToolCallFailed(ForgeError):
    """Raised inside the MCP handler so the SDK reports ``isError``."""


def _prompt_role(role: str) -> str:
    # MCP prompt messages only carry user/assistant roles
    return "assistant" if role == "assistant" else "user"


def create_mcp_server(context: ForgeContext) -> Server:
    """Build an MCP server bound to ``context.dispatcher``."""
    dispatcher = context.dispatcher
    server = Server(SERVER_NAME)

    @server.list_tools()
    async def list_tools() -> List[types.Tool]:
        return [
            types.Tool(name=t.name, description=t.description, inputSchema=t.input_schema)
            for t in dispatcher.list_tools()
        ]

    @server.call_tool()
    async def call_tool(name: str, arguments: Dict[str, Any]) -> List[types.TextContent]:
        result = await dispatcher.call_tool(name, arguments)
        if not result.success:
            raise ToolCallFailed(result.error)
        return [types.TextContent(type="text", text=result.text)]

    @server.list_prompts()
    async def list_prompts() -> List[types.Prompt]:
        return [
            types.Prompt(
                name=p.name,
                description=p.description,
                arguments=[
                    types.PromptArgument(name=a.name, description=a.description, required=a.required)
                    for a in p.params
                ],
            )
            for p in dispatcher.list_prompts()
        ]

    @server.get_prompt()
    async def get_prompt(name: str, arguments: Optional[Dict[str, str]]) -> types.GetPromptResult:
        rendered = dispatcher.get_prompt(name, arguments or {})
        return types.GetPromptResult(
            description=rendered.description,
            messages=[
                types.PromptMessage(
                    role=_prompt_role(m["role"]),
                    content=types.TextContent(type="text", text=m["content"]),
                )
                for m in rendered.messages
            ],
        )

    return server


async def serve_stdio(context: ForgeContext):
    """Serve MCP over stdin/stdout until the client disconnects."""
    server = create_mcp_server(context)
    logger.info("Serving MCP over stdio", extra={"tools": len(context.dispatcher.list_tools())})
    try:
        async with stdio_server() as (read_stream, write_stream):
            await server.run(read_stream, write_stream, server.create_initialization_options())
    finally:
        await context.aclose()
        logger.info("MCP stdio session closed")
