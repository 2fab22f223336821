# app/crud/user_profile.py
from sqlalchemy.orm import Session
from app.models.user_profile import UserProfile
from app.schemas.user_profile import UserProfileUpdate

def get_user_profile_by_user_id(db: Session, user_id: int):
    """Get user profile by user ID"""
    return db.query(UserProfile).filter(UserProfile.user_id == user_id).first()

def upsert_user_profile(db: Session, user_id: int, profile_in: UserProfileUpdate):
    """
    Create the profile on first write, otherwise apply only the fields that were sent.
    """
    db_profile = get_user_profile_by_user_id(db, user_id)
    if not db_profile:
        db_profile = UserProfile(user_id=user_id, available_equipment=[], injuries=[])
        db.add(db_profile)

    update_data = profile_in.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(db_profile, field, value)

    db.commit()
    db.refresh(db_profile)
    return db_profile
