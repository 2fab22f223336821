import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.database import get_db
from app.crud import user as crud_user
from app.crud import workout_plan as crud_workout_plan
from app.crud import user_profile as crud_user_profile
from app.models.chat import ChatSession
from app.schemas.workout_plan import (
    CompleteDayRequest,
    ParsePlanRequest,
    ProgressResponse,
    WorkoutCompletionResponse,
    WorkoutPlan,
    WorkoutPlanHistoryResponse,
    WorkoutPlanResponse,
)
from app.services import workout_service
from app.services.plan_parser import parse_workout_plan

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/workout-plans",
    tags=["Workout Plans"]
)


def _ensure_user(db: Session, user_id: int):
    if crud_user.get_user(db, user_id=user_id) is None:
        raise HTTPException(status_code=404, detail="User not found")


def _profile_answers(db: Session, user_id: int) -> dict:
    """
    Answers for the plan prompt: the latest finished chat profile,
    else what is stored on the user and their profile.
    """
    session = db.query(ChatSession).filter(
        ChatSession.user_id == user_id,
        ChatSession.collecting_profile == False
    ).order_by(ChatSession.id.desc()).first()
    if session and session.profile_answers:
        return dict(session.profile_answers)

    user = crud_user.get_user(db, user_id=user_id)
    profile = crud_user_profile.get_user_profile_by_user_id(db, user_id=user_id)
    if profile is None:
        raise ValueError("UserProfile not found.")

    return {
        "age": user.age,
        "gender": user.gender,
        "height": f"{user.height_cm}cm" if user.height_cm else None,
        "weight": f"{user.current_weight_kg}kg" if user.current_weight_kg else None,
        "goal": profile.primary_goal,
        "level": profile.fitness_level,
        "days_per_week": profile.workout_days_per_week,
        "time_per_workout": profile.time_per_workout,
        "equipment": ", ".join(profile.available_equipment or []) or "None",
        "limitations": ", ".join(profile.injuries or []) or "none",
    }


@router.post("/{user_id}/generate", response_model=WorkoutPlanResponse)
def generate_plan_endpoint(user_id: int, db: Session = Depends(get_db)):
    """
    Generate a personalized workout plan from the user's profile.
    """
    _ensure_user(db, user_id)
    try:
        answers = _profile_answers(db, user_id)
        return workout_service.generate_workout_plan(db, user_id, answers)
    except ValueError as ve:
        raise HTTPException(status_code=400, detail=str(ve))
    except Exception as e:
        logger.error(f"[Workout API] Unhandled Exception: {e}")
        # Return generic error message to client, log the specific error
        raise HTTPException(status_code=500, detail="Failed to generate workout plan")


@router.post("/{user_id}/parse", response_model=WorkoutPlanResponse)
def parse_plan_endpoint(user_id: int, request: ParsePlanRequest, db: Session = Depends(get_db)):
    """
    Parse plan text that was produced elsewhere and store it as the current plan.
    """
    _ensure_user(db, user_id)
    plan = parse_workout_plan(request.raw_text, request.days_per_week)
    return workout_service.save_workout_plan(db, user_id, plan)


@router.post("/parse-preview", response_model=WorkoutPlan)
def parse_preview_endpoint(request: ParsePlanRequest):
    """Parse only, nothing is stored."""
    return parse_workout_plan(request.raw_text, request.days_per_week)


@router.get("/{user_id}/current", response_model=WorkoutPlanResponse)
def get_current_workout(user_id: int, db: Session = Depends(get_db)):
    plan = crud_workout_plan.get_current_workout_plan(db, user_id)
    if not plan:
        raise HTTPException(status_code=404, detail="Workout plan not found")
    return plan


@router.get("/{user_id}/history", response_model=List[WorkoutPlanHistoryResponse])
def get_plan_history(user_id: int, limit: int = 20, db: Session = Depends(get_db)):
    return crud_workout_plan.get_workout_plan_history(db, user_id, limit=limit)


@router.post("/{user_id}/complete", response_model=WorkoutCompletionResponse)
def complete_day(user_id: int, request: CompleteDayRequest, db: Session = Depends(get_db)):
    """
    Mark a day of the current plan as completed.
    """
    _ensure_user(db, user_id)
    try:
        return workout_service.complete_workout_day(
            db, user_id, request.day_number,
            notes=request.notes,
            calories_burned=request.calories_burned
        )
    except ValueError as ve:
        raise HTTPException(status_code=400, detail=str(ve))


@router.get("/{user_id}/progress", response_model=ProgressResponse)
def get_progress(user_id: int, db: Session = Depends(get_db)):
    _ensure_user(db, user_id)
    return workout_service.get_progress(db, user_id)
