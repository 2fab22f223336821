import platform
from celery import Celery

from config import REDIS_URL

# Determine pool type based on OS (macOS fork is unsafe with native extensions)
if platform.system() == "Darwin":
    pool_type = "solo"
else:
    pool_type = "prefork"

# Initialize Celery
celery_app = Celery(
    "fitness_tracker",
    broker=REDIS_URL,
    backend=REDIS_URL,
    include=["app.tasks.scheduler"]
)

# Configuration
celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    worker_pool=pool_type,
    worker_prefetch_multiplier=1,
    beat_schedule_filename="celery_beat_data/celerybeat-schedule", # Keep root clean
)
