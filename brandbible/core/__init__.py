"""Core business logic components."""

from .gateway import BrandGateway, ConversationHandle
from .orchestrator import BrandOrchestrator, GeneratorSession
from .chat import ChatSessionController

__all__ = [
    "BrandGateway",
    "ConversationHandle",
    "BrandOrchestrator",
    "GeneratorSession",
    "ChatSessionController",
]
