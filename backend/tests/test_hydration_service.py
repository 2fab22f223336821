import unittest
from datetime import date, datetime, timedelta, timezone
from types import SimpleNamespace
from unittest.mock import MagicMock

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Base
import app.models  # noqa: F401
from app.models.user import User
from app.models.tracking import HydrationLog
from app.services import hydration_service
from app.services.hydration_model import HydrationDecision, HydrationDecisionModel, TIP_TEXTS

# Use an in-memory SQLite DB for testing logic only
engine = create_engine("sqlite:///:memory:", connect_args={"check_same_thread": False}, poolclass=StaticPool)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

TODAY = date(2026, 3, 10)


def _log(day_offset, total, goal=2000):
    return SimpleNamespace(date=TODAY - timedelta(days=day_offset), total_ml=total, goal_ml=goal)


class TestAdherenceMath(unittest.TestCase):

    def test_daily_adherence(self):
        self.assertEqual(hydration_service.daily_adherence(1000, 2000), 50.0)
        self.assertEqual(hydration_service.daily_adherence(3000, 2000), 150.0)
        self.assertEqual(hydration_service.daily_adherence(500, 0), 0.0)
        self.assertEqual(hydration_service.daily_adherence(500, None), 0.0)

    def test_average_over_window(self):
        logs = [_log(0, 2000), _log(1, 1000), _log(6, 0), _log(7, 2000), _log(30, 2000)]
        # Only offsets 0, 1 and 6 are inside the 7-day window
        self.assertAlmostEqual(hydration_service.average_adherence(logs, TODAY, 7), 50.0)

    def test_single_day_window(self):
        logs = [_log(0, 500), _log(1, 2000)]
        self.assertEqual(hydration_service.average_adherence(logs, TODAY, 1), 25.0)

    def test_no_logs(self):
        self.assertEqual(hydration_service.average_adherence([], TODAY), 0.0)

    def test_future_logs_ignored(self):
        self.assertEqual(hydration_service.average_adherence([_log(-1, 2000)], TODAY), 0.0)

    def test_base_intervals(self):
        self.assertEqual(hydration_service.base_interval_for_intensity("light"), 60)
        self.assertEqual(hydration_service.base_interval_for_intensity("moderate"), 45)
        self.assertEqual(hydration_service.base_interval_for_intensity("intense"), 30)
        self.assertEqual(hydration_service.base_interval_for_intensity("extreme"), 45)


class TestReminderDue(unittest.TestCase):

    def setUp(self):
        self.now = datetime(2026, 3, 10, 12, 0)

    def test_due_after_interval(self):
        last = self.now - timedelta(minutes=45)
        self.assertTrue(hydration_service.is_reminder_due(self.now, last, 45, 500, 2500))

    def test_not_due_before_interval(self):
        last = self.now - timedelta(minutes=44, seconds=59)
        self.assertFalse(hydration_service.is_reminder_due(self.now, last, 45, 500, 2500))

    def test_not_due_when_goal_met(self):
        last = self.now - timedelta(hours=3)
        self.assertFalse(hydration_service.is_reminder_due(self.now, last, 45, 2500, 2500))

    def test_not_due_without_last_drink(self):
        self.assertFalse(hydration_service.is_reminder_due(self.now, None, 45, 0, 2500))


class TestHydrationServiceDB(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        cls.model = HydrationDecisionModel.train()

    def setUp(self):
        Base.metadata.create_all(bind=engine)
        self.db = TestingSessionLocal()
        self.user = User(name="Sam", email="sam@example.com")
        self.db.add(self.user)
        self.db.commit()

    def tearDown(self):
        self.db.close()
        Base.metadata.drop_all(bind=engine)

    def test_log_water_creates_log_and_sets_interval(self):
        now = datetime(2026, 3, 10, 9, 30)
        settings, log, decision = hydration_service.log_water(self.db, self.user.id, 500, self.model, now=now)

        self.assertEqual(log.total_ml, 500)
        self.assertEqual(log.goal_ml, 2500)
        self.assertEqual(log.date, now.date())
        self.assertEqual(settings.last_drink_at, now)
        # 20% adherence, moderate -> low bucket
        self.assertEqual(decision.tip_text, TIP_TEXTS["low"])
        self.assertEqual(settings.notification_interval, 45)

    def test_log_water_converts_offset_time_to_utc(self):
        logged_at = datetime(2026, 10, 19, 1, 30, tzinfo=timezone(timedelta(hours=5)))
        settings, log, _ = hydration_service.log_water(self.db, self.user.id, 300, self.model, now=logged_at)

        self.assertEqual(settings.last_drink_at, datetime(2026, 10, 18, 20, 30))
        self.assertIsNone(settings.last_drink_at.tzinfo)
        self.assertEqual(log.date, date(2026, 10, 18))

    def test_no_history_uses_intensity_interval(self):
        model = MagicMock()
        model.decide.return_value = HydrationDecision(interval=99, tip_category="low", tip_text=TIP_TEXTS["low"])

        settings, decision = hydration_service.update_settings(
            self.db, self.user.id, model, workout_intensity="light", today=TODAY
        )
        self.assertEqual(decision.interval, 60)
        self.assertEqual(decision.tip_text, TIP_TEXTS["low"])
        self.assertEqual(settings.notification_interval, 60)

        # Once a drink is on record the model's interval is used as is
        settings, _, decision = hydration_service.log_water(
            self.db, self.user.id, 250, model, now=datetime(2026, 3, 10, 8, 0)
        )
        self.assertEqual(decision.interval, 99)
        self.assertEqual(settings.notification_interval, 99)

    def test_log_water_accumulates(self):
        now = datetime(2026, 3, 10, 9, 30)
        hydration_service.log_water(self.db, self.user.id, 500, self.model, now=now)
        _, log, _ = hydration_service.log_water(self.db, self.user.id, 750, self.model, now=now + timedelta(hours=1))
        self.assertEqual(log.total_ml, 1250)
        self.assertEqual(self.db.query(HydrationLog).count(), 1)

    def test_goal_met_moves_interval(self):
        hydration_service.update_settings(self.db, self.user.id, self.model, workout_intensity="light")
        now = datetime(2026, 3, 10, 9, 30)
        settings, _, decision = hydration_service.log_water(self.db, self.user.id, 2500, self.model, now=now)
        self.assertEqual(decision.tip_category, "high")
        self.assertEqual(settings.notification_interval, 75)

    def test_non_positive_amount_rejected(self):
        with self.assertRaises(ValueError):
            hydration_service.log_water(self.db, self.user.id, 0, self.model)
        with self.assertRaises(ValueError):
            hydration_service.log_water(self.db, self.user.id, -100, self.model)

    def test_update_settings_recomputes_interval(self):
        settings, _ = hydration_service.update_settings(
            self.db, self.user.id, self.model, workout_intensity="intense", reminder_enabled=True
        )
        self.assertEqual(settings.workout_intensity, "intense")
        self.assertTrue(settings.reminder_enabled)
        self.assertEqual(settings.notification_interval, 30)

    def test_update_goal_changes_today_log(self):
        now = datetime.utcnow()
        hydration_service.log_water(self.db, self.user.id, 1000, self.model, now=now)
        hydration_service.update_settings(self.db, self.user.id, self.model, daily_goal_ml=1000, today=now.date())
        status = hydration_service.get_status(self.db, self.user.id, today=now.date())
        self.assertEqual(status["daily_goal_ml"], 1000)
        log = self.db.query(HydrationLog).first()
        self.assertEqual(log.goal_ml, 1000)

    def test_invalid_goal_rejected(self):
        with self.assertRaises(ValueError):
            hydration_service.update_settings(self.db, self.user.id, self.model, daily_goal_ml=0)

    def test_decision_window(self):
        today = date(2026, 3, 10)
        self.db.add_all([
            HydrationLog(user_id=self.user.id, date=today, total_ml=2500, goal_ml=2500),
            HydrationLog(user_id=self.user.id, date=today - timedelta(days=1), total_ml=0, goal_ml=2500),
            HydrationLog(user_id=self.user.id, date=today - timedelta(days=10), total_ml=0, goal_ml=2500),
        ])
        self.db.commit()

        adherence, decision = hydration_service.get_decision(self.db, self.user.id, self.model, 7, today=today)
        self.assertEqual(adherence, 50.0)
        self.assertEqual(decision.tip_category, "low")

        adherence, decision = hydration_service.get_decision(self.db, self.user.id, self.model, 1, today=today)
        self.assertEqual(adherence, 100.0)
        self.assertEqual(decision.tip_category, "high")
        self.assertEqual(decision.interval, 60)

    def test_decision_window_must_be_positive(self):
        with self.assertRaises(ValueError):
            hydration_service.get_decision(self.db, self.user.id, self.model, 0)

    def test_reset_today(self):
        now = datetime.utcnow()
        hydration_service.log_water(self.db, self.user.id, 800, self.model, now=now)
        log = hydration_service.reset_today(self.db, self.user.id, today=now.date())
        self.assertEqual(log.total_ml, 0)
        self.assertEqual(hydration_service.get_status(self.db, self.user.id, today=now.date())["current_progress_ml"], 0)


if __name__ == '__main__':
    unittest.main()
