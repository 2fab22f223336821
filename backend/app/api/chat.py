import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from app.database import get_db
from app.crud import user as crud_user
from app.schemas.chat import ChatRequest, ChatResponse, ChatMessage
from app.services import profile_chat

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chat", tags=["Chat"])


class StartChatRequest(BaseModel):
    user_id: int
    session_id: str = Field(..., min_length=1, max_length=100)


def _ensure_user(db: Session, user_id: int):
    if crud_user.get_user(db, user_id=user_id) is None:
        raise HTTPException(status_code=404, detail="User not found")


@router.post("/start", response_model=ChatResponse)
def start_chat(request: StartChatRequest, db: Session = Depends(get_db)):
    """
    Opens a session with the greeting and the first profile question.
    """
    _ensure_user(db, request.user_id)
    try:
        reply = profile_chat.start_session(db, request.user_id, request.session_id)
    except PermissionError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))

    return ChatResponse(
        response=reply.response,
        session_id=request.session_id,
        collecting_profile=reply.collecting_profile
    )


@router.post("", response_model=ChatResponse)
def chat(request: ChatRequest, db: Session = Depends(get_db)):
    """
    One chat turn. Answers profile questions until the profile is complete,
    then talks to the fitness assistant.
    """
    _ensure_user(db, request.user_id)
    try:
        reply = profile_chat.handle_message(db, request.user_id, request.session_id, request.message)
    except PermissionError as e:
        logger.warning(f"[Chat API] User {request.user_id} tried to use session {request.session_id}")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    except ValueError as ve:
        raise HTTPException(status_code=400, detail=str(ve))
    except Exception as e:
        logger.error(f"[Chat API] Unhandled Exception: {e}")
        raise HTTPException(status_code=500, detail="Failed to process chat message")

    return ChatResponse(
        response=reply.response,
        session_id=request.session_id,
        collecting_profile=reply.collecting_profile,
        plan_id=reply.plan_id
    )


@router.get("/history", response_model=List[ChatMessage])
def get_chat_history(user_id: int, session_id: str, limit: int = 50, db: Session = Depends(get_db)):
    """
    Messages of one session, oldest first.
    """
    rows = profile_chat.get_history(db, user_id, session_id, limit=limit)
    return [
        ChatMessage(role=row.role, content=row.content, timestamp=row.created_at)
        for row in rows
    ]
