import unittest
from unittest.mock import patch

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.database import Base, get_db
from app.models.notification import Notification
from app.services.hydration_model import HydrationDecisionModel, TIP_TEXTS

engine = create_engine("sqlite:///:memory:", connect_args={"check_same_thread": False}, poolclass=StaticPool)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


PLAN_TEXT = """## Two Day Split
**Summary:** Upper and lower.

### Day 1: Upper (~50 minutes)
1. **Bench Press** - 4 sets x 8-10 reps, Rest: 90 seconds
### Day 2: Lower (~55 minutes)
1. **Squat** - 5 sets x 5 reps, Rest: 120 seconds

**Additional Tips:**
- Warm up well
"""


class ApiTestCase(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        app.dependency_overrides[get_db] = override_get_db
        # Lifespan is not run by a bare TestClient
        app.state.hydration_model = HydrationDecisionModel.train()
        cls.client = TestClient(app)

    @classmethod
    def tearDownClass(cls):
        app.dependency_overrides.clear()

    def setUp(self):
        Base.metadata.create_all(bind=engine)

    def tearDown(self):
        Base.metadata.drop_all(bind=engine)

    def create_user(self, email="jo@example.com"):
        response = self.client.post("/users", json={"name": "Jo", "email": email, "age": 30})
        self.assertEqual(response.status_code, 201)
        return response.json()["id"]


class TestUsersApi(ApiTestCase):

    def test_root_and_health(self):
        self.assertEqual(self.client.get("/").status_code, 200)
        self.assertEqual(self.client.get("/health").json()["status"], "healthy")

    def test_user_crud(self):
        user_id = self.create_user()

        response = self.client.get(f"/users/{user_id}")
        self.assertEqual(response.json()["email"], "jo@example.com")

        response = self.client.put(f"/users/{user_id}", json={"current_weight_kg": 72.5})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["current_weight_kg"], 72.5)
        self.assertEqual(response.json()["name"], "Jo")

        self.assertEqual(self.client.delete(f"/users/{user_id}").status_code, 200)
        self.assertEqual(self.client.get(f"/users/{user_id}").status_code, 404)

    def test_duplicate_email(self):
        self.create_user()
        response = self.client.post("/users", json={"name": "Other", "email": "jo@example.com"})
        self.assertEqual(response.status_code, 400)

    def test_invalid_email(self):
        response = self.client.post("/users", json={"name": "Jo", "email": "not-an-email"})
        self.assertEqual(response.status_code, 422)

    def test_profile_upsert(self):
        user_id = self.create_user()
        self.assertEqual(self.client.get(f"/users/{user_id}/profile").status_code, 404)

        response = self.client.put(f"/users/{user_id}/profile", json={"primary_goal": "Strength", "workout_days_per_week": 3})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["workout_days_per_week"], 3)

        response = self.client.put(f"/users/{user_id}/profile", json={"fitness_level": "Advanced"})
        body = response.json()
        self.assertEqual(body["primary_goal"], "Strength")
        self.assertEqual(body["fitness_level"], "Advanced")

        self.assertEqual(self.client.put("/users/999/profile", json={}).status_code, 404)


class TestWorkoutPlanApi(ApiTestCase):

    def test_parse_and_store(self):
        user_id = self.create_user()
        response = self.client.post(f"/workout-plans/{user_id}/parse", json={"raw_text": PLAN_TEXT, "days_per_week": "2"})
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["plan_name"], "Two Day Split")
        self.assertEqual([d["duration"] for d in body["weekly_schedule"]], [50, 55])
        self.assertEqual(body["rest_days"], [3, 4, 5, 6, 7])
        self.assertEqual(body["tips"], ["Warm up well"])

        current = self.client.get(f"/workout-plans/{user_id}/current")
        self.assertEqual(current.json()["id"], body["id"])

    def test_parse_replaces_and_archives(self):
        user_id = self.create_user()
        self.client.post(f"/workout-plans/{user_id}/parse", json={"raw_text": PLAN_TEXT, "days_per_week": 2})
        self.client.post(f"/workout-plans/{user_id}/parse", json={"raw_text": "garbage"})

        current = self.client.get(f"/workout-plans/{user_id}/current").json()
        self.assertEqual(current["plan_name"], "Custom Workout Plan")
        self.assertEqual(current["weekly_schedule"], [])

        history = self.client.get(f"/workout-plans/{user_id}/history").json()
        self.assertEqual(len(history), 1)
        self.assertEqual(history[0]["plan_name"], "Two Day Split")

    def test_parse_preview(self):
        response = self.client.post("/workout-plans/parse-preview", json={"raw_text": PLAN_TEXT})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.json()["weekly_schedule"]), 2)

    def test_current_missing(self):
        user_id = self.create_user()
        self.assertEqual(self.client.get(f"/workout-plans/{user_id}/current").status_code, 404)

    def test_complete_and_progress(self):
        user_id = self.create_user()
        self.client.post(f"/workout-plans/{user_id}/parse", json={"raw_text": PLAN_TEXT, "days_per_week": 2})

        response = self.client.post(f"/workout-plans/{user_id}/complete", json={"day_number": 1, "calories_burned": 320})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["day_number"], 1)

        response = self.client.post(f"/workout-plans/{user_id}/complete", json={"day_number": 6})
        self.assertEqual(response.status_code, 400)

        progress = self.client.get(f"/workout-plans/{user_id}/progress").json()
        self.assertEqual(progress["workouts_completed"], 1)
        self.assertEqual(progress["calories_burned"], 320.0)

    @patch("app.services.workout_service.llm_service.call_llm")
    def test_generate_from_profile(self, mock_call_llm):
        mock_call_llm.return_value = PLAN_TEXT
        user_id = self.create_user()
        self.client.put(f"/users/{user_id}/profile", json={"primary_goal": "Strength", "workout_days_per_week": 2})

        response = self.client.post(f"/workout-plans/{user_id}/generate")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.json()["weekly_schedule"]), 2)

    @patch("app.services.workout_service.llm_service.call_llm")
    def test_generate_llm_failure(self, mock_call_llm):
        mock_call_llm.return_value = None
        user_id = self.create_user()
        self.client.put(f"/users/{user_id}/profile", json={"primary_goal": "Strength"})

        response = self.client.post(f"/workout-plans/{user_id}/generate")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"], "Failed to generate workout plan.")

    def test_generate_without_profile(self):
        user_id = self.create_user()
        self.assertEqual(self.client.post(f"/workout-plans/{user_id}/generate").status_code, 400)
        self.assertEqual(self.client.post("/workout-plans/999/generate").status_code, 404)


class TestHydrationApi(ApiTestCase):

    def test_status_defaults(self):
        user_id = self.create_user()
        body = self.client.get(f"/hydration/{user_id}").json()
        self.assertEqual(body["daily_goal_ml"], 2500)
        self.assertEqual(body["current_progress_ml"], 0)
        self.assertEqual(body["workout_intensity"], "moderate")
        self.assertEqual(body["notification_interval"], 45)
        self.assertFalse(body["reminder_enabled"])
        self.assertEqual(body["tip_text"], TIP_TEXTS["low"])

    def test_log_and_reset(self):
        user_id = self.create_user()
        response = self.client.post(f"/hydration/{user_id}/log", json={"amount_ml": 250})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["current_progress_ml"], 250)
        self.assertIsNotNone(response.json()["last_drink_at"])

        response = self.client.post(f"/hydration/{user_id}/reset")
        self.assertEqual(response.json()["current_progress_ml"], 0)

    def test_log_with_offset_timestamp(self):
        user_id = self.create_user()
        response = self.client.post(
            f"/hydration/{user_id}/log",
            json={"amount_ml": 300, "logged_at": "2026-10-19T01:30:00+05:00"}
        )
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["last_drink_at"], "2026-10-18T20:30:00")
        self.assertEqual(body["date"], "2026-10-18")
        self.assertEqual(body["current_progress_ml"], 300)

    def test_log_rejects_non_positive(self):
        user_id = self.create_user()
        response = self.client.post(f"/hydration/{user_id}/log", json={"amount_ml": 0})
        self.assertEqual(response.status_code, 422)

    def test_patch_settings(self):
        user_id = self.create_user()
        response = self.client.patch(f"/hydration/{user_id}", json={"workout_intensity": "intense", "reminder_enabled": True})
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["notification_interval"], 30)
        self.assertTrue(body["reminder_enabled"])

        response = self.client.patch(f"/hydration/{user_id}", json={"workout_intensity": "extreme"})
        self.assertEqual(response.status_code, 422)

    def test_decision(self):
        user_id = self.create_user()
        self.client.post(f"/hydration/{user_id}/log", json={"amount_ml": 2500})

        body = self.client.get(f"/hydration/{user_id}/decision", params={"window_days": 1}).json()
        self.assertEqual(body["adherence_percent"], 100.0)
        self.assertEqual(body["tip_category"], "high")
        self.assertEqual(body["interval"], 60)
        self.assertEqual(body["window_days"], 1)

        self.assertEqual(self.client.get(f"/hydration/{user_id}/decision", params={"window_days": 0}).status_code, 422)

    def test_unknown_user(self):
        self.assertEqual(self.client.get("/hydration/999").status_code, 404)


class TestChatAndNotificationsApi(ApiTestCase):

    def test_chat_start_and_answer(self):
        user_id = self.create_user()
        response = self.client.post("/chat/start", json={"user_id": user_id, "session_id": "abc"})
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.json()["collecting_profile"])

        response = self.client.post("/chat", json={"user_id": user_id, "session_id": "abc", "message": "30"})
        body = response.json()
        self.assertTrue(body["collecting_profile"])
        self.assertEqual(body["session_id"], "abc")
        self.assertIn("gender", body["response"])

        history = self.client.get("/chat/history", params={"user_id": user_id, "session_id": "abc"}).json()
        self.assertEqual([m["role"] for m in history], ["assistant", "user", "assistant"])

    def test_chat_session_of_other_user(self):
        first = self.create_user("a@example.com")
        second = self.create_user("b@example.com")
        self.client.post("/chat", json={"user_id": first, "session_id": "shared", "message": "30"})

        response = self.client.post("/chat", json={"user_id": second, "session_id": "shared", "message": "30"})
        self.assertEqual(response.status_code, 403)

    def test_notifications(self):
        user_id = self.create_user()
        db = TestingSessionLocal()
        db.add(Notification(user_id=user_id, message="Drink!", type="hydration_reminder"))
        db.commit()
        db.close()

        unread = self.client.get(f"/notifications/{user_id}/unread").json()
        self.assertEqual(len(unread), 1)

        response = self.client.post(f"/notifications/{unread[0]['id']}/read")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(self.client.get(f"/notifications/{user_id}/unread").json(), [])
        self.assertEqual(self.client.post("/notifications/999/read").status_code, 404)


if __name__ == '__main__':
    unittest.main()
