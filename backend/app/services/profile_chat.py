import logging
import re
from typing import Any, Dict, List, NamedTuple, Optional

from sqlalchemy.orm import Session

from app.models.chat import ChatHistory, ChatSession
from app.models.user import User
from app.models.user_profile import UserProfile
from app.services import llm_service, workout_service

logger = logging.getLogger(__name__)

"""
Profile Chat
------------
The assistant first walks the user through PROFILE_QUESTIONS, one answer per
message. After the last answer the profile is stored, a workout plan is
generated and the session switches to free fitness chat.
"""

GREETING = "Hello! I'm your AI fitness assistant. Before we begin, let's build your fitness profile."
PLAN_READY = "Your plan is ready! You can now ask follow-up questions."
PLAN_ERROR = "Error generating your workout plan."
CHAT_ERROR = "I encountered an error. Please try again."

HISTORY_TURNS = 10


class ProfileQuestion(NamedTuple):
    key: str
    question: str


PROFILE_QUESTIONS = (
    ProfileQuestion("age", "Great! Let's create your workout profile. What is your age?"),
    ProfileQuestion("gender", "What is your gender? (M/F/Other or skip)"),
    ProfileQuestion("height", "What is your height? (e.g., 5'10\" or 178cm)"),
    ProfileQuestion("weight", "What is your current weight? (lbs or kg)"),
    ProfileQuestion("goal", "What is your primary fitness goal? (Build muscle / Lose weight / General fitness / Strength / Endurance)"),
    ProfileQuestion("level", "What is your fitness level? (Beginner / Intermediate / Advanced)"),
    ProfileQuestion("days_per_week", "How many days per week can you work out? (1-7)"),
    ProfileQuestion("time_per_workout", "How much time can you spend per workout? (minutes)"),
    ProfileQuestion("equipment", "What equipment do you have? (Full gym / Home gym / Minimal / None)"),
    ProfileQuestion("limitations", "Any injuries or limitations? (or type 'none')"),
)


class ChatReply(NamedTuple):
    response: str
    collecting_profile: bool
    plan_id: Optional[int] = None


# --- Answer parsing ---

def _first_number(text: Any) -> Optional[float]:
    match = re.search(r"\d+(?:\.\d+)?", str(text or ""))
    return float(match.group()) if match else None


def parse_int(text: Any, low: int = None, high: int = None) -> Optional[int]:
    value = _first_number(text)
    if value is None:
        return None
    value = int(value)
    if (low is not None and value < low) or (high is not None and value > high):
        return None
    return value


def parse_height_cm(text: Any) -> Optional[float]:
    """Accepts 178cm, 1.78m, 5'10" or a bare number (cm)."""
    raw = str(text or "").strip().lower()
    feet = re.search(r"(\d+)\s*(?:'|ft|feet)\s*(?:(\d+(?:\.\d+)?)\s*(?:\"|in|inches)?)?", raw)
    if feet:
        inches = int(feet.group(1)) * 12 + float(feet.group(2) or 0)
        return round(inches * 2.54, 1)

    value = _first_number(raw)
    if value is None or value <= 0:
        return None
    if re.search(r"\d\s*m\b", raw) and value < 3:
        return round(value * 100, 1)
    return value


def parse_weight_kg(text: Any) -> Optional[float]:
    raw = str(text or "").strip().lower()
    value = _first_number(raw)
    if value is None or value <= 0:
        return None
    if re.search(r"lb|pound", raw):
        return round(value * 0.453592, 1)
    return value


def parse_gender(text: Any) -> Optional[str]:
    raw = str(text or "").strip().lower()
    if raw in ("", "skip"):
        return None
    if raw in ("m", "male", "man"):
        return "male"
    if raw in ("f", "female", "woman"):
        return "female"
    return "other"


def _list_answer(text: Any) -> List[str]:
    raw = str(text or "").strip()
    if not raw or raw.lower() in ("none", "no", "n/a"):
        return []
    return [raw]


# --- Persistence ---

def sync_profile(db: Session, user_id: int, answers: Dict[str, Any]) -> None:
    """Writes the collected answers to User and UserProfile."""
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise ValueError("User not found.")

    age = parse_int(answers.get("age"), 1, 129)
    if age is not None:
        user.age = age
    gender = parse_gender(answers.get("gender"))
    if gender:
        user.gender = gender
    height = parse_height_cm(answers.get("height"))
    if height:
        user.height_cm = height
    weight = parse_weight_kg(answers.get("weight"))
    if weight:
        user.current_weight_kg = weight
        if user.target_weight_kg is None:
            user.target_weight_kg = weight

    profile = db.query(UserProfile).filter(UserProfile.user_id == user_id).first()
    if not profile:
        profile = UserProfile(user_id=user_id)
        db.add(profile)

    profile.primary_goal = answers.get("goal") or profile.primary_goal
    profile.fitness_level = answers.get("level") or profile.fitness_level
    profile.available_equipment = _list_answer(answers.get("equipment"))
    profile.injuries = _list_answer(answers.get("limitations"))
    days = parse_int(answers.get("days_per_week"), 1, 7)
    if days is not None:
        profile.workout_days_per_week = days
    minutes = parse_int(answers.get("time_per_workout"), 1)
    if minutes is not None:
        profile.time_per_workout = minutes

    db.commit()
    logger.info(f"[ProfileChat] Synced profile for user {user_id}")


def get_or_create_session(db: Session, user_id: int, session_id: str) -> ChatSession:
    session = db.query(ChatSession).filter(ChatSession.session_id == session_id).first()
    if session:
        if session.user_id != user_id:
            raise PermissionError("This session ID belongs to another user. Please start a new chat.")
        return session

    session = ChatSession(
        session_id=session_id,
        user_id=user_id,
        collecting_profile=True,
        question_index=0,
        profile_answers={}
    )
    db.add(session)
    db.commit()
    db.refresh(session)
    return session


def _save_message(db: Session, user_id: int, session_id: str, role: str, content: str) -> None:
    db.add(ChatHistory(user_id=user_id, session_id=session_id, role=role, content=content))


def get_history(db: Session, user_id: int, session_id: str, limit: int = 50) -> List[ChatHistory]:
    rows = db.query(ChatHistory).filter(
        ChatHistory.user_id == user_id,
        ChatHistory.session_id == session_id
    ).order_by(ChatHistory.id.desc()).limit(limit).all()
    return list(reversed(rows))


# --- State machine ---

def start_session(db: Session, user_id: int, session_id: str) -> ChatReply:
    """Greets the user and asks the first question of a fresh session."""
    session = get_or_create_session(db, user_id, session_id)
    if not session.collecting_profile:
        return ChatReply(PLAN_READY, False)

    text = f"{GREETING}\n\n{PROFILE_QUESTIONS[session.question_index].question}"
    _save_message(db, user_id, session_id, "assistant", text)
    db.commit()
    return ChatReply(text, True)


def _finish_profile(db: Session, session: ChatSession) -> ChatReply:
    answers = dict(session.profile_answers or {})
    session.collecting_profile = False
    db.commit()

    sync_profile(db, session.user_id, answers)

    try:
        plan = workout_service.generate_workout_plan(db, session.user_id, answers)
    except ValueError as e:
        logger.error(f"[ProfileChat] Plan generation failed for user {session.user_id}: {e}")
        return ChatReply(PLAN_ERROR, False)

    return ChatReply(f"{plan.full_plan}\n\n{PLAN_READY}", False, plan.id)


def handle_message(db: Session, user_id: int, session_id: str, message: str) -> ChatReply:
    """
    One chat turn. While collecting, the message answers the current question.
    Afterwards it goes to the LLM along with the recent history.
    """
    session = get_or_create_session(db, user_id, session_id)
    message = message.strip()

    if session.collecting_profile:
        index = min(session.question_index, len(PROFILE_QUESTIONS) - 1)
        key = PROFILE_QUESTIONS[index].key

        answers = dict(session.profile_answers or {})
        answers[key] = message
        # Reassign so the JSON column is flagged dirty
        session.profile_answers = answers
        session.question_index = index + 1
        _save_message(db, user_id, session_id, "user", message)

        if session.question_index < len(PROFILE_QUESTIONS):
            reply = ChatReply(PROFILE_QUESTIONS[session.question_index].question, True)
        else:
            reply = _finish_profile(db, session)

        _save_message(db, user_id, session_id, "assistant", reply.response)
        db.commit()
        return reply

    history = [
        {"role": row.role, "content": row.content}
        for row in get_history(db, user_id, session_id, limit=HISTORY_TURNS)
    ]
    _save_message(db, user_id, session_id, "user", message)

    text = llm_service.call_llm_with_history(workout_service.SYSTEM_INSTRUCTION, history, message)
    if text is None:
        text = CHAT_ERROR

    _save_message(db, user_id, session_id, "assistant", text)
    db.commit()
    return ChatReply(text, False)
