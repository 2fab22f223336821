from sqlalchemy.orm import Session
from app.models.workout_plan import WorkoutPlan
from app.models.workout_plan_history import WorkoutPlanHistory
from app.models.tracking import WorkoutCompletion

"""
Workout Plan CRUD
-----------------
Pure Database Access Object for Workout Plans.
Business logic for generation/parsing lives in app.services.workout_service.
"""

def get_current_workout_plan(db: Session, user_id: int):
    """
    Retrieve the existing workout plan for a user.
    """
    return db.query(WorkoutPlan).filter(WorkoutPlan.user_id == user_id).first()

def get_workout_plan_history(db: Session, user_id: int, limit: int = 20):
    return db.query(WorkoutPlanHistory).filter(
        WorkoutPlanHistory.user_id == user_id
    ).order_by(WorkoutPlanHistory.created_at.desc(), WorkoutPlanHistory.id.desc()).limit(limit).all()

def get_completions(db: Session, user_id: int):
    return db.query(WorkoutCompletion).filter(
        WorkoutCompletion.user_id == user_id
    ).order_by(WorkoutCompletion.completed_at.asc(), WorkoutCompletion.id.asc()).all()
