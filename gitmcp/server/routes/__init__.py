"""Server route handlers."""

from __future__ import annotations

from .mcp_routes import McpRoutes
from .status_routes import StatusRoutes

__all__ = [
    "McpRoutes",
    "StatusRoutes",
]
