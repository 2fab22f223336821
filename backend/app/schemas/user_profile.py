# app/schemas/user_profile.py
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime

class UserProfileBase(BaseModel):
    primary_goal: Optional[str] = Field("", description="Build muscle / Lose weight / General fitness / Strength / Endurance")
    fitness_level: Optional[str] = Field("", description="Beginner / Intermediate / Advanced")
    available_equipment: List[str] = Field(default_factory=list)
    injuries: List[str] = Field(default_factory=list)
    workout_days_per_week: Optional[int] = Field(None, ge=1, le=7, description="Number of workout days per week")
    time_per_workout: Optional[int] = Field(None, gt=0, description="Minutes per session")

class UserProfileUpdate(BaseModel):
    primary_goal: Optional[str] = None
    fitness_level: Optional[str] = None
    available_equipment: Optional[List[str]] = None
    injuries: Optional[List[str]] = None
    workout_days_per_week: Optional[int] = Field(None, ge=1, le=7)
    time_per_workout: Optional[int] = Field(None, gt=0)

    class Config:
        json_schema_extra = {
            "example": {
                "primary_goal": "Build muscle",
                "fitness_level": "Intermediate",
                "available_equipment": ["Full gym"],
                "injuries": [],
                "workout_days_per_week": 4,
                "time_per_workout": 60
            }
        }

class UserProfileResponse(UserProfileBase):
    id: int
    user_id: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
