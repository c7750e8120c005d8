"""Tests for the MCP stdio binding."""

import json
import asyncio

import mcp.types as types

from agent_forge.stdio import create_mcp_server, _prompt_role


def handle(server, request):
    result = asyncio.run(server.request_handlers[type(request)](request))
    return result.root


def test_lists_declared_tools(context):
    server = create_mcp_server(context)
    result = handle(server, types.ListToolsRequest(method="tools/list"))

    names = [t.name for t in result.tools]
    assert names == [t.name for t in context.dispatcher.list_tools()]
    create_tool = result.tools[0]
    assert create_tool.inputSchema["required"] == ["agent_name", "core_traits"]


def test_lists_prompts(context):
    server = create_mcp_server(context)
    result = handle(server, types.ListPromptsRequest(method="prompts/list"))

    prompts = {p.name: p for p in result.prompts}
    assert set(prompts) == {"expert_persona", "discussion_protocol"}
    assert [a.name for a in prompts["expert_persona"].arguments if a.required] == [
        "expert_name", "core_traits",
    ]


def test_get_prompt_maps_roles(context):
    server = create_mcp_server(context)
    result = handle(server, types.GetPromptRequest(
        method="prompts/get",
        params=types.GetPromptRequestParams(name="discussion_protocol", arguments={"topic": "tea"}),
    ))

    assert [m.role for m in result.messages] == ["user", "user"]
    assert result.messages[-1].content.text == "Discussion topic: tea"


def test_prompt_role():
    assert _prompt_role("system") == "user"
    assert _prompt_role("user") == "user"
    assert _prompt_role("assistant") == "assistant"


def call_tool(server, name, arguments):
    return handle(server, types.CallToolRequest(
        method="tools/call",
        params=types.CallToolRequestParams(name=name, arguments=arguments),
    ))


def test_call_tool_returns_dispatcher_json(context):
    server = create_mcp_server(context)
    result = call_tool(server, "create_agent", {"agent_name": "Socrates", "core_traits": "curious"})

    assert not result.isError
    assert len(result.content) == 1
    payload = json.loads(result.content[0].text)
    assert payload["message"] == "agent created successfully"
    assert payload["agent_id"] in context.registry


def test_call_tool_failure_is_error(context):
    server = create_mcp_server(context)
    result = call_tool(server, "get_agent", {"agent_id": "missing"})

    assert result.isError
    assert "agent with ID missing not found" in result.content[0].text
