from __future__ import annotations

from typing import Final

SERVER_ID: Final[str] = "agricultural-ai-mcp"
SERVER_TITLE: Final[str] = "Agricultural AI MCP Server"
SERVER_VERSION: Final[str] = "1.0.0"
SERVER_DESCRIPTION: Final[str] = (
    "HTTP server providing crop price data and web search for agricultural AI chatbots"
)
MCP_PROTOCOL_VERSION: Final[str] = "2024-11-05"
RPC_ENDPOINT: Final[str] = "/mcp"
TOOLS_PREFIX: Final[str] = "/tools/"
