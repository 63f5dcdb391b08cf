"""
Pydantic request/response models shared across route modules.
"""

from typing import Optional

from pydantic import BaseModel, Field


class MessageRequest(BaseModel):
    content: str = Field(..., max_length=100_000)


class ChatMessage(BaseModel):
    role: str
    content: str


class SessionOut(BaseModel):
    id: str
    state: str
    created_at: str
    turns: int
    last_error: Optional[str] = None


class SessionDetail(SessionOut):
    messages: list[ChatMessage] = []


class MessageReply(BaseModel):
    session_id: str
    state: str
    replies: list[ChatMessage]
    error: Optional[str] = None


class DeletedOut(BaseModel):
    status: str
    id: str


class HealthOut(BaseModel):
    status: str
    model: str
    sessions: int
