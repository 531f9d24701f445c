"""Request and response schemas for the HTTP API."""
from typing import List, Optional
from pydantic import BaseModel, Field


class QueryRequest(BaseModel):
    """Body of a question submission."""
    question: str = Field(..., min_length=1, description="Question to ask the sidekick")
    conversation_id: Optional[str] = Field(
        None,
        description="Existing conversation to continue; the X-ConversationId header takes precedence"
    )


class QueryResponse(BaseModel):
    """Answer to a submitted question."""
    answer: str
    conversation_id: str


class InteractionModel(BaseModel):
    """One question/answer pair of a stored conversation."""
    question: str
    answer: str


class ConversationResponse(BaseModel):
    """Full stored conversation, interactions in chronological order."""
    id: str
    interactions: List[InteractionModel]
