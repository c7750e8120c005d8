"""
Agent Forge HTTP Server

FastAPI surface over the tool dispatcher, for callers that do not speak
MCP. Tool results are the same JSON payloads the MCP transport returns.
"""

import json
import logging
from typing import Dict, Any
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from . import __version__
from .context import ForgeContext
from .errors import ValidationError
from .logs import parse_level

logger = logging.getLogger("agent-forge.server")

ERROR_STATUS = {
    "ValidationError": 400,
    "NotFoundError": 404,
    "UnknownTool": 404,
    "UpstreamError": 502,
}


# =============================================================================
# Pydantic Models
# =============================================================================

class ToolCallRequest(BaseModel):
    """Request to call a tool."""
    arguments: Dict[str, Any] = Field(default_factory=dict)


class PromptRequest(BaseModel):
    """Request to render a prompt."""
    arguments: Dict[str, str] = Field(default_factory=dict)


# =============================================================================
# Application Factory
# =============================================================================

def create_app(context: ForgeContext) -> FastAPI:
    """Create FastAPI application."""
    dispatcher = context.dispatcher

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup and shutdown events."""
        logger.info("Agent Forge HTTP server starting...")
        yield
        logger.info("Agent Forge HTTP server shutting down...")
        await context.aclose()

    app = FastAPI(
        title="Agent Forge",
        description="Agent registry and role-play tools over a chat-completion API",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.context = context

    # =========================================================================
    # Routes
    # =========================================================================

    @app.get("/")
    async def root():
        """Health check and service info."""
        return {
            "service": "Agent Forge",
            "version": __version__,
            "status": "running",
            "registry": context.registry.stats(),
            "dispatcher": dispatcher.stats(),
        }

    @app.get("/health")
    async def health():
        """Health check."""
        return {"status": "healthy"}

    # -------------------------------------------------------------------------
    # Tools
    # -------------------------------------------------------------------------

    @app.get("/tools")
    async def list_tools():
        """List available tools."""
        tools = dispatcher.list_tools()
        return {"tools": [t.to_dict() for t in tools], "count": len(tools)}

    @app.post("/tools/{tool_name}")
    async def call_tool(tool_name: str, request: ToolCallRequest):
        """Call a tool."""
        result = await dispatcher.call_tool(tool_name, request.arguments)
        if not result.success:
            status = ERROR_STATUS.get(result.error_type, 500)
            raise HTTPException(status_code=status, detail=result.error)

        return {
            "status": "success",
            "tool": dispatcher.resolve(tool_name),
            "result": json.loads(result.text),
        }

    # -------------------------------------------------------------------------
    # Prompts
    # -------------------------------------------------------------------------

    @app.get("/prompts")
    async def list_prompts():
        """List available prompt templates."""
        prompts = dispatcher.list_prompts()
        return {"prompts": [p.to_dict() for p in prompts], "count": len(prompts)}

    @app.post("/prompts/{prompt_name}")
    async def get_prompt(prompt_name: str, request: PromptRequest):
        """Render a prompt template."""
        if prompt_name not in {p.name for p in dispatcher.list_prompts()}:
            raise HTTPException(status_code=404, detail=f"unknown prompt: {prompt_name}")
        try:
            return dispatcher.get_prompt(prompt_name, request.arguments).to_dict()
        except ValidationError as e:
            raise HTTPException(status_code=400, detail=e.message)

    return app


# =============================================================================
# Main
# =============================================================================

def run_http(context: ForgeContext, host: str = None, port: int = None):
    """Run the HTTP server until interrupted."""
    import uvicorn

    server = context.config.server
    host = host or server.host
    port = port or server.port
    logger.info(f"Serving HTTP on {host}:{port}", extra={"rate_limit": server.rate_limit})

    uvicorn.run(
        create_app(context),
        host=host,
        port=port,
        log_level=logging.getLevelName(parse_level(context.config.log.level)).lower(),
        timeout_graceful_shutdown=server.shutdown_timeout,
    )
