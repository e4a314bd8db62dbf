from pydantic import BaseModel, Field
from typing import Optional


class GenerateRequest(BaseModel):
    """Request model for a completion."""
    systemPrompt: Optional[str] = Field(default=None, description="Optional system message")
    userPrompt: Optional[str] = Field(default=None, description="The user's prompt (required)")
    model: Optional[str] = Field(default=None, description="Upstream model id")


class GenerateResponse(BaseModel):
    """Response model for a completion."""
    result: str


class ChatMessage(BaseModel):
    """A single message sent upstream."""
    role: str = Field(..., pattern="^(system|user)$")
    content: str
