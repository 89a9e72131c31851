"""HTTP boundary -- aiohttp app factory, routes and middleware."""

from .app import AppFactory, create_app, main

__all__ = ["AppFactory", "create_app", "main"]
