"""gitmcp -- session-oriented command gateway for GitHub."""

__version__ = "1.0.0"

SERVER_NAME = "GitHub MCP Server"
PROTOCOL_VERSION = "MCP/2.1"
