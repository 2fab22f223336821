# app/api/user_profile.py
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.schemas.user_profile import UserProfileResponse, UserProfileUpdate
from app.crud import user_profile as crud_user_profile
from app.crud import user as crud_user


router = APIRouter(prefix="/users", tags=["user-profiles"])

# GET - Get profile for a user
@router.get("/{user_id}/profile", response_model=UserProfileResponse)
def read_profile(user_id: int, db: Session = Depends(get_db)):
    db_profile = crud_user_profile.get_user_profile_by_user_id(db, user_id=user_id)
    if db_profile is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Profile not found"
        )
    return db_profile

# PUT - Create or update profile for a user
@router.put("/{user_id}/profile", response_model=UserProfileResponse)
def upsert_profile(
    user_id: int,
    profile_update: UserProfileUpdate,
    db: Session = Depends(get_db)
):
    """
    Creates the profile on first call, afterwards updates the sent fields only.
    """
    if crud_user.get_user(db, user_id=user_id) is None:
        raise HTTPException(status_code=404, detail="User not found")

    return crud_user_profile.upsert_user_profile(db, user_id=user_id, profile_in=profile_update)
