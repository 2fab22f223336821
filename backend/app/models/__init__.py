# Import all models here
from app.models.user import User
from app.models.user_profile import UserProfile
from app.models.workout_plan import WorkoutPlan
from app.models.workout_plan_history import WorkoutPlanHistory
from app.models.tracking import WorkoutCompletion, HydrationLog
from app.models.hydration import HydrationSettings
from app.models.notification import Notification
from app.models.chat import ChatHistory, ChatSession
