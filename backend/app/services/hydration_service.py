import logging
from datetime import date, datetime, timezone
from typing import Iterable, Optional

from sqlalchemy.orm import Session

from app.crud import hydration as crud_hydration
from app.models.hydration import HydrationSettings
from app.models.tracking import HydrationLog
from app.services.hydration_model import HydrationDecision, HydrationDecisionModel
from config import HYDRATION_WINDOW_DAYS

logger = logging.getLogger(__name__)

"""
Hydration Service
-----------------
Water logging and the adherence numbers the decision model consumes.
Each drink updates today's log, then the model re-derives the reminder
interval from the rolling adherence and stores it on the user's settings.
"""

BASE_INTERVALS = {
    "light": 60,
    "moderate": 45,
    "intense": 30,
}
DEFAULT_BASE_INTERVAL = 45

REMINDER_MESSAGE = "Time to Hydrate! 💧 It's been {minutes} minutes. Drink some water!"


def _today() -> date:
    # Drinks are stamped in UTC, so "today" is the UTC date too
    return datetime.utcnow().date()


def daily_adherence(total_ml: float, goal_ml: float) -> float:
    """Percent of the daily goal reached. 0 when there is no goal."""
    if not goal_ml:
        return 0.0
    return (total_ml / goal_ml) * 100


def average_adherence(logs: Iterable[HydrationLog], today: date, window_days: int = HYDRATION_WINDOW_DAYS) -> float:
    """
    Mean daily adherence over the logs dated in (today - window_days, today].
    Days without a log do not count towards the mean.
    """
    values = []
    for log in logs:
        age = (today - log.date).days
        if 0 <= age < window_days:
            values.append(daily_adherence(log.total_ml or 0, log.goal_ml))

    if not values:
        return 0.0
    return sum(values) / len(values)


def base_interval_for_intensity(intensity: Optional[str]) -> int:
    return BASE_INTERVALS.get(intensity, DEFAULT_BASE_INTERVAL)


def is_reminder_due(now: datetime, last_drink_at: Optional[datetime], interval_min: int,
                    intake_ml: int, goal_ml: int) -> bool:
    """A reminder is due once the interval has passed since the last drink and the goal is not met yet."""
    if last_drink_at is None:
        return False
    if goal_ml and intake_ml >= goal_ml:
        return False
    elapsed_min = (now - last_drink_at).total_seconds() / 60
    return elapsed_min >= interval_min


def minutes_since(now: datetime, last_drink_at: datetime) -> int:
    return int((now - last_drink_at).total_seconds() // 60)


def get_decision(db: Session, user_id: int, model: HydrationDecisionModel,
                 window_days: int = HYDRATION_WINDOW_DAYS, today: Optional[date] = None):
    """
    Returns (adherence_percent, HydrationDecision) for the user's recent logs.
    """
    if window_days < 1:
        raise ValueError("window_days must be at least 1")

    today = today or _today()
    settings = crud_hydration.get_or_create_settings(db, user_id)
    logs = crud_hydration.get_recent_logs(db, user_id, today, window_days)

    adherence = average_adherence(logs, today, window_days)
    decision = model.decide(adherence, settings.workout_intensity)
    if not logs:
        # No history yet: the interval comes from the workout intensity alone
        decision = decision._replace(interval=base_interval_for_intensity(settings.workout_intensity))
    return adherence, decision


def _apply_decision(db: Session, settings: HydrationSettings, model: HydrationDecisionModel,
                    today: date) -> HydrationDecision:
    adherence, decision = get_decision(db, settings.user_id, model, today=today)
    if settings.notification_interval != decision.interval:
        logger.info(
            f"[Hydration] User {settings.user_id}: interval {settings.notification_interval} -> "
            f"{decision.interval} min (adherence {adherence:.1f}%)"
        )
    settings.notification_interval = decision.interval
    return decision


def log_water(db: Session, user_id: int, amount_ml: int, model: HydrationDecisionModel,
              now: Optional[datetime] = None):
    """
    Adds a drink to today's log and refreshes the reminder interval.
    Returns (settings, today's log, decision).
    """
    if amount_ml is None or amount_ml <= 0:
        raise ValueError("Water amount must be positive.")

    now = now or datetime.utcnow()
    if now.tzinfo is not None:
        now = now.astimezone(timezone.utc).replace(tzinfo=None)
    today = now.date()

    settings = crud_hydration.get_or_create_settings(db, user_id)
    log = crud_hydration.get_or_create_log(db, user_id, today, settings.daily_goal_ml)
    log.total_ml = (log.total_ml or 0) + amount_ml
    settings.last_drink_at = now
    db.flush()

    decision = _apply_decision(db, settings, model, today)

    db.commit()
    db.refresh(settings)
    db.refresh(log)
    logger.info(f"[Hydration] User {user_id} logged {amount_ml}ml ({log.total_ml}/{log.goal_ml}ml)")
    return settings, log, decision


def update_settings(db: Session, user_id: int, model: HydrationDecisionModel,
                    daily_goal_ml: Optional[int] = None, workout_intensity: Optional[str] = None,
                    reminder_enabled: Optional[bool] = None, today: Optional[date] = None):
    """Changes goal / intensity / reminder flag and recomputes the interval."""
    if daily_goal_ml is not None and daily_goal_ml <= 0:
        raise ValueError("Daily goal must be positive.")

    today = today or _today()
    settings = crud_hydration.get_or_create_settings(db, user_id)

    if daily_goal_ml is not None:
        settings.daily_goal_ml = daily_goal_ml
        # Today's goal follows the new setting, past days keep theirs
        log = crud_hydration.get_log(db, user_id, today)
        if log:
            log.goal_ml = daily_goal_ml
    if workout_intensity is not None:
        settings.workout_intensity = workout_intensity
    if reminder_enabled is not None:
        settings.reminder_enabled = reminder_enabled
    db.flush()

    decision = _apply_decision(db, settings, model, today)

    db.commit()
    db.refresh(settings)
    return settings, decision


def reset_today(db: Session, user_id: int, today: Optional[date] = None) -> HydrationLog:
    today = today or _today()
    settings = crud_hydration.get_or_create_settings(db, user_id)
    log = crud_hydration.get_or_create_log(db, user_id, today, settings.daily_goal_ml)
    log.total_ml = 0
    db.commit()
    db.refresh(log)
    logger.info(f"[Hydration] User {user_id} reset today's intake")
    return log


def get_status(db: Session, user_id: int, today: Optional[date] = None) -> dict:
    today = today or _today()
    settings = crud_hydration.get_or_create_settings(db, user_id)
    log = crud_hydration.get_log(db, user_id, today)
    return {
        "daily_goal_ml": settings.daily_goal_ml,
        "current_progress_ml": log.total_ml if log else 0,
        "workout_intensity": settings.workout_intensity,
        "notification_interval": settings.notification_interval,
        "reminder_enabled": settings.reminder_enabled,
        "last_drink_at": settings.last_drink_at,
        "date": today,
    }
