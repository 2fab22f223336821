from app.celery_app import celery_app
from sqlalchemy.orm import Session
from app.database import SessionLocal
from app.crud import hydration as crud_hydration
from app.models.notification import Notification
from app.services import hydration_service
from app.services.hydration_model import HydrationDecisionModel
from config import REMINDER_CHECK_SECONDS
from datetime import datetime
import logging

logger = logging.getLogger(__name__)

REMINDER_TYPE = "hydration_reminder"

_model = None


def get_model() -> HydrationDecisionModel:
    """One trained model per worker process."""
    global _model
    if _model is None:
        _model = HydrationDecisionModel.train()
    return _model


def has_unread_reminder(db: Session, user_id: int) -> bool:
    return db.query(Notification.id).filter(
        Notification.user_id == user_id,
        Notification.type == REMINDER_TYPE,
        Notification.is_read == False
    ).first() is not None


def send_due_reminders(db: Session, now: datetime) -> int:
    """
    Adds a reminder notification for every user whose interval has passed
    since their last drink. At most one unread reminder per user.
    """
    sent = 0
    for settings in crud_hydration.get_reminder_candidates(db):
        user_id = settings.user_id
        try:
            log = crud_hydration.get_log(db, user_id, now.date())
            intake = log.total_ml if log else 0
            goal = log.goal_ml if log else settings.daily_goal_ml

            if not hydration_service.is_reminder_due(
                now, settings.last_drink_at, settings.notification_interval, intake, goal
            ):
                continue
            if has_unread_reminder(db, user_id):
                continue

            minutes = hydration_service.minutes_since(now, settings.last_drink_at)
            db.add(Notification(
                user_id=user_id,
                message=hydration_service.REMINDER_MESSAGE.format(minutes=minutes),
                type=REMINDER_TYPE
            ))
            db.commit()
            sent += 1
            logger.info(f"[Scheduler] Hydration reminder sent to user {user_id} ({minutes} min since last drink)")

        except Exception as e:
            db.rollback()
            logger.error(f"[Scheduler] Error checking hydration for user {user_id}: {e}")

    return sent


# --- BEAT SCHEDULER TASK ---
@celery_app.task
def check_hydration_reminders():
    """
    Beat task: runs every REMINDER_CHECK_SECONDS.
    """
    db: Session = SessionLocal()
    try:
        sent = send_due_reminders(db, datetime.utcnow())
        logger.info(f"[Scheduler] Hydration check ran. Sent {sent} reminders.")
        return sent
    finally:
        db.close()


@celery_app.task
def refresh_notification_intervals():
    """
    Beat task: re-derives every user's reminder interval once a day,
    so adherence falling out of the window is reflected without a new drink.
    """
    db: Session = SessionLocal()
    model = get_model()
    updated = 0
    try:
        for settings in crud_hydration.get_reminder_candidates(db):
            try:
                _, decision = hydration_service.get_decision(db, settings.user_id, model)
                if settings.notification_interval != decision.interval:
                    settings.notification_interval = decision.interval
                    db.commit()
                    updated += 1
            except Exception as e:
                db.rollback()
                logger.error(f"[Scheduler] Error refreshing interval for user {settings.user_id}: {e}")
        logger.info(f"[Scheduler] Refreshed intervals. Updated {updated} users.")
        return updated
    finally:
        db.close()


# --- SCHEDULE CONFIG ---
from celery.schedules import crontab

celery_app.conf.beat_schedule = {
    'check-hydration-reminders': {
        'task': 'app.tasks.scheduler.check_hydration_reminders',
        'schedule': float(REMINDER_CHECK_SECONDS)
    },
    'refresh-notification-intervals': {
        'task': 'app.tasks.scheduler.refresh_notification_intervals',
        'schedule': crontab(minute=5, hour=0)
    },
}
