from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional

EMAIL_REGX = r"^[^@]+@[^@]+\.[^@]+$"


# Schema for creating user
class UserCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., pattern=EMAIL_REGX)
    age: Optional[int] = Field(None, gt=0, lt=130)
    gender: Optional[str] = None
    height_cm: Optional[float] = Field(None, gt=0)
    current_weight_kg: Optional[float] = Field(None, gt=0)
    target_weight_kg: Optional[float] = Field(None, gt=0)

# Schema for updating user
class UserUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[str] = Field(None, pattern=EMAIL_REGX)
    age: Optional[int] = Field(None, gt=0, lt=130)
    gender: Optional[str] = None
    height_cm: Optional[float] = Field(None, gt=0)
    current_weight_kg: Optional[float] = Field(None, gt=0)
    target_weight_kg: Optional[float] = Field(None, gt=0)

# Schema for returning user
class UserResponse(BaseModel):
    id: int
    name: str
    email: str
    age: Optional[int] = None
    gender: Optional[str] = None
    height_cm: Optional[float] = None
    current_weight_kg: Optional[float] = None
    target_weight_kg: Optional[float] = None
    created_at: datetime

    class Config:
        from_attributes = True
