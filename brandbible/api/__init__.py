"""HTTP routers for the brand bible service."""

from . import chat, exports, generator, health

__all__ = ["chat", "exports", "generator", "health"]
