"""Data models for the Geo Sidekick chat service."""
from .conversation import Conversation, Interaction
from .api import QueryRequest, QueryResponse, InteractionModel, ConversationResponse

__all__ = [
    "Conversation",
    "Interaction",
    "QueryRequest",
    "QueryResponse",
    "InteractionModel",
    "ConversationResponse",
]
