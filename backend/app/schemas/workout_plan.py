from pydantic import BaseModel, Field
from typing import List, Optional, Union
from datetime import datetime

DEFAULT_PLAN_NAME = "Custom Workout Plan"
FALLBACK_SUMMARY = "AI-generated workout plan based on your profile"
SUMMARY_MAX_LENGTH = 500


class Exercise(BaseModel):
    name: str
    sets: str = ""
    reps: str = ""
    rest: str = ""   # "<N> seconds" or ""
    notes: str = ""


class WorkoutDay(BaseModel):
    day_number: int
    day_name: str = ""
    focus: str = ""
    duration: int = 0  # minutes
    exercises: List[Exercise] = Field(default_factory=list)
    warmup: str = ""
    cooldown: str = ""


class WorkoutPlan(BaseModel):
    """Structured plan derived from the AI response. `full_plan` always keeps the source text."""
    plan_name: str = DEFAULT_PLAN_NAME
    summary: str = Field("", max_length=SUMMARY_MAX_LENGTH)
    full_plan: str = ""
    structure: str = DEFAULT_PLAN_NAME
    weekly_schedule: List[WorkoutDay] = Field(default_factory=list)
    rest_days: List[int] = Field(default_factory=list)
    tips: List[str] = Field(default_factory=list)


class ParsePlanRequest(BaseModel):
    raw_text: str
    days_per_week: Optional[Union[int, str]] = None


class WorkoutPlanResponse(WorkoutPlan):
    id: int
    user_id: int
    generated_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class WorkoutPlanHistoryResponse(BaseModel):
    id: int
    plan_name: Optional[str] = None
    snapshot: dict
    created_at: datetime

    class Config:
        from_attributes = True


class CompleteDayRequest(BaseModel):
    day_number: int = Field(..., ge=1)
    notes: Optional[str] = ""
    calories_burned: Optional[float] = Field(0.0, ge=0)


class WorkoutCompletionResponse(BaseModel):
    day_number: int
    notes: Optional[str] = ""
    completed_at: datetime

    class Config:
        from_attributes = True


class ProgressResponse(BaseModel):
    workouts_completed: int
    calories_burned: float
    last_workout_date: Optional[datetime] = None
    completed_workouts: List[WorkoutCompletionResponse] = Field(default_factory=list)
