from pydantic import BaseModel, Field
from typing import Literal, Optional
from datetime import date, datetime

Intensity = Literal["light", "moderate", "intense"]


class HydrationSettingsUpdate(BaseModel):
    daily_goal_ml: Optional[int] = Field(None, gt=0, le=10000)
    workout_intensity: Optional[Intensity] = None
    reminder_enabled: Optional[bool] = None


class LogWaterRequest(BaseModel):
    amount_ml: int = Field(..., gt=0, le=5000)
    logged_at: Optional[datetime] = None


class HydrationDecisionResponse(BaseModel):
    adherence_percent: float
    window_days: int
    interval: int
    tip_category: str
    tip_text: str


class HydrationStatusResponse(BaseModel):
    daily_goal_ml: int
    current_progress_ml: int
    workout_intensity: str
    notification_interval: int
    reminder_enabled: bool
    last_drink_at: Optional[datetime] = None
    date: date
    tip_text: Optional[str] = None
