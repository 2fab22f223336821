import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.database import engine, Base
import app.models  # noqa: F401  registers tables on Base.metadata
from app.api import users, user_profile, workout_plan, chat, hydration, notifications
from app.services.hydration_model import HydrationDecisionModel
from config import LOG_LEVEL

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Ensure all tables exist
    logger.info("[Startup] Ensuring all tables exist via create_all...")
    Base.metadata.create_all(bind=engine)

    # Train once, shared read-only by every request
    app.state.hydration_model = HydrationDecisionModel.train()
    yield


app = FastAPI(title="Fitness Tracker API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


app.include_router(users.router)
app.include_router(user_profile.router)
app.include_router(workout_plan.router)
app.include_router(chat.router)
app.include_router(hydration.router)
app.include_router(notifications.router)

# Root endpoint
@app.get("/")
def root():
    return {
        "message": "Welcome to Fitness Tracker API",
        "docs": "/docs",
        "redoc": "/redoc"
    }

# Health check endpoint
@app.get("/health")
def health_check():
    return {"status": "healthy", "message": "API is running"}
