from datetime import date, timedelta
from sqlalchemy.orm import Session
from app.models.hydration import HydrationSettings
from app.models.tracking import HydrationLog

def get_settings(db: Session, user_id: int):
    return db.query(HydrationSettings).filter(HydrationSettings.user_id == user_id).first()

def get_or_create_settings(db: Session, user_id: int) -> HydrationSettings:
    settings = get_settings(db, user_id)
    if not settings:
        settings = HydrationSettings(user_id=user_id)
        db.add(settings)
        db.commit()
        db.refresh(settings)
    return settings

def get_log(db: Session, user_id: int, day: date):
    return db.query(HydrationLog).filter(
        HydrationLog.user_id == user_id,
        HydrationLog.date == day
    ).first()

def get_or_create_log(db: Session, user_id: int, day: date, goal_ml: int) -> HydrationLog:
    log = get_log(db, user_id, day)
    if not log:
        log = HydrationLog(user_id=user_id, date=day, total_ml=0, goal_ml=goal_ml)
        db.add(log)
        db.flush()
    return log

def get_recent_logs(db: Session, user_id: int, today: date, window_days: int):
    """Logs dated in (today - window_days, today]."""
    start = today - timedelta(days=window_days - 1)
    return db.query(HydrationLog).filter(
        HydrationLog.user_id == user_id,
        HydrationLog.date >= start,
        HydrationLog.date <= today
    ).order_by(HydrationLog.date.asc()).all()

def get_reminder_candidates(db: Session):
    """Users with reminders on and at least one logged drink."""
    return db.query(HydrationSettings).filter(
        HydrationSettings.reminder_enabled == True,
        HydrationSettings.last_drink_at.isnot(None)
    ).all()
