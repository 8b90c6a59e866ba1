"""
╔══════════════════════════════════════════╗
║      ChatGPT Bridge — MCP Server         ║
╚══════════════════════════════════════════╝

FastMCP stdio server exposing one tool, `chatgpt`, with two
operations: ask and get_conversations. Calls run on a worker thread
so the event loop keeps answering the transport while a reply streams.
"""

import asyncio
import logging
from typing import Annotated, Literal, Optional

from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError
from pydantic import Field

log = logging.getLogger("chatgpt_bridge.server")

TOOL_DESCRIPTION = "Interact with the ChatGPT desktop app on macOS"


def create_server(dispatcher, name="ChatGPT MCP Tool"):
    """Build the FastMCP server around a ToolDispatcher."""
    mcp = FastMCP(name)

    @mcp.tool(name="chatgpt", description=TOOL_DESCRIPTION)
    async def chatgpt(
        operation: Annotated[
            Literal["ask", "get_conversations"],
            Field(description="Operation to perform: 'ask' or 'get_conversations'"),
        ],
        prompt: Annotated[
            Optional[str],
            Field(description="The prompt to send to ChatGPT (required for ask operation)"),
        ] = None,
        conversation_id: Annotated[
            Optional[str],
            Field(description="Optional conversation ID to continue a specific conversation"),
        ] = None,
    ) -> str:
        arguments = {"operation": operation}
        if prompt is not None:
            arguments["prompt"] = prompt
        if conversation_id is not None:
            arguments["conversation_id"] = conversation_id

        result = await asyncio.to_thread(dispatcher.handle, arguments)
        if result["error"]:
            raise ToolError(result["content"])
        return result["content"]

    return mcp
