import logging
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.crud import workout_plan as crud_workout_plan
from app.models.tracking import WorkoutCompletion
from app.models.workout_plan import WorkoutPlan
from app.models.workout_plan_history import WorkoutPlanHistory
from app.schemas import workout_plan as schemas
from app.services import llm_service
from app.services.plan_parser import parse_workout_plan

logger = logging.getLogger(__name__)

"""
Workout Service
---------------
Orchestrates the generation of Workout Plans.
1. Builds the plan request from the collected profile answers.
2. Calls the LLM for a markdown plan.
3. Parses the text into a structured plan.
4. Archives the previous plan and saves the new one.
Also records completed days and the progress derived from them.
"""

SYSTEM_INSTRUCTION = """You are a professional fitness coach and workout assistant. Your role is to:

1. Help users create personalized workout plans based on their goals, fitness level, and available equipment
2. Provide exercise recommendations and proper form guidance
3. Answer questions about fitness, muscle building, weight loss, and nutrition as it relates to workouts
4. Motivate and encourage users in their fitness journey
5. Suggest workout routines for different muscle groups and fitness goals

IMPORTANT: You should ONLY discuss topics related to fitness, workouts, exercise, and related nutrition. If a user asks about unrelated topics, politely redirect them back to fitness and workout discussions.

Be encouraging, knowledgeable, and safety-conscious. Always remind users to consult healthcare professionals before starting new workout programs if needed."""

# The parser reads exactly this layout back
PLAN_FORMAT_INSTRUCTION = """
Format the plan in markdown exactly like this:

## <Plan title>
**Summary:** <two or three sentences about the plan>

### Day 1: <Focus> (~<minutes> minutes)
**Warm-up:** <warm-up description>
**Exercises:**
1. **<Exercise name>** - <sets> sets × <reps> reps, Rest: <seconds> seconds
   - Notes: <form cue>
**Cool-down:** <cool-down description>

(one "### Day N" section per workout day, numbered from 1)

**Additional Tips:**
- <tip>
- <tip>
"""


def create_profile_summary(profile: Dict[str, Any]) -> str:
    """
    Builds the plan request from the profile chat answers.
    Missing answers are reported as "Not specified".
    """
    def answer(key):
        value = profile.get(key)
        if value is None or str(value).strip() == "":
            return "Not specified"
        return str(value).strip()

    days = answer("days_per_week")

    return f"""Create a personalized weekly workout plan for me.

My profile:
- Age: {answer("age")}
- Gender: {answer("gender")}
- Height: {answer("height")}
- Weight: {answer("weight")}
- Primary goal: {answer("goal")}
- Fitness level: {answer("level")}
- Workout days per week: {days}
- Time per workout: {answer("time_per_workout")} minutes
- Available equipment: {answer("equipment")}
- Injuries or limitations: {answer("limitations")}

Plan exactly {days} workout days.
{PLAN_FORMAT_INSTRUCTION}"""


def _snapshot(plan: WorkoutPlan) -> Dict[str, Any]:
    return {
        "plan_name": plan.plan_name,
        "summary": plan.summary,
        "full_plan": plan.full_plan,
        "structure": plan.structure,
        "weekly_schedule": plan.weekly_schedule or [],
        "rest_days": plan.rest_days or [],
        "tips": plan.tips or [],
        "generated_at": plan.generated_at.isoformat() if plan.generated_at else None,
    }


def save_workout_plan(db: Session, user_id: int, plan: schemas.WorkoutPlan) -> WorkoutPlan:
    """
    Upserts the user's current plan. The plan it replaces is archived to history first.
    """
    db_plan = crud_workout_plan.get_current_workout_plan(db, user_id)

    if db_plan:
        db.add(WorkoutPlanHistory(
            user_id=user_id,
            plan_name=db_plan.plan_name,
            snapshot=_snapshot(db_plan)
        ))
        logger.info(f"[Workout] Archived previous plan {db_plan.id} for user {user_id}")
    else:
        db_plan = WorkoutPlan(user_id=user_id)
        db.add(db_plan)

    data = plan.model_dump()
    db_plan.plan_name = data["plan_name"]
    db_plan.summary = data["summary"]
    db_plan.full_plan = data["full_plan"]
    db_plan.structure = data["structure"]
    db_plan.weekly_schedule = data["weekly_schedule"]
    db_plan.rest_days = data["rest_days"]
    db_plan.tips = data["tips"]
    db_plan.generated_at = datetime.utcnow()

    db.commit()
    db.refresh(db_plan)
    return db_plan


def generate_workout_plan(db: Session, user_id: int, profile_answers: Dict[str, Any]) -> WorkoutPlan:
    """
    Main orchestrator for workout plan generation.
    """
    logger.info(f"[Workout] Generating workout plan for user {user_id}")

    prompt = create_profile_summary(profile_answers)
    raw_text = llm_service.call_llm(SYSTEM_INSTRUCTION, prompt, temperature=0.7, max_tokens=1500)
    if raw_text is None:
        raise ValueError("Failed to generate workout plan.")

    plan = parse_workout_plan(raw_text, profile_answers.get("days_per_week"))
    return save_workout_plan(db, user_id, plan)


def complete_workout_day(db: Session, user_id: int, day_number: int, notes: str = "",
                         calories_burned: float = 0.0) -> WorkoutCompletion:
    """Marks a plan day as done. The day has to exist in the current plan."""
    plan = crud_workout_plan.get_current_workout_plan(db, user_id)
    if not plan:
        raise ValueError("Workout plan not found.")

    plan_days = {day.get("day_number") for day in (plan.weekly_schedule or [])}
    if day_number not in plan_days:
        raise ValueError(f"Day {day_number} is not part of the current workout plan.")

    completion = WorkoutCompletion(
        user_id=user_id,
        day_number=day_number,
        notes=notes or "",
        calories_burned=calories_burned or 0.0
    )
    db.add(completion)
    db.commit()
    db.refresh(completion)

    logger.info(f"[Workout] User {user_id} completed day {day_number}")
    return completion


def get_progress(db: Session, user_id: int) -> Dict[str, Any]:
    completions = crud_workout_plan.get_completions(db, user_id)
    total_calories = db.query(func.coalesce(func.sum(WorkoutCompletion.calories_burned), 0.0)).filter(
        WorkoutCompletion.user_id == user_id
    ).scalar()

    last: Optional[datetime] = completions[-1].completed_at if completions else None
    return {
        "workouts_completed": len(completions),
        "calories_burned": float(total_calories or 0.0),
        "last_workout_date": last,
        "completed_workouts": completions,
    }
