from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class ChatRequest(BaseModel):
    user_id: int
    session_id: str = Field(..., min_length=1, max_length=100)
    message: str = Field(..., min_length=1)


class ChatResponse(BaseModel):
    response: str
    session_id: str
    collecting_profile: bool
    plan_id: Optional[int] = None


class ChatMessage(BaseModel):
    role: str
    content: str
    timestamp: Optional[datetime] = None
