import logging
import math
from collections import Counter, defaultdict
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, NamedTuple, Optional

from app.data.hydration_training_data import HYDRATION_TRAINING_DATA, TrainingRow

logger = logging.getLogger(__name__)

"""
Hydration Decision Model
------------------------
A small lookup "model" for hydration reminders.
1. Training: group the fixed dataset by (intensity, adherence bucket),
   learn the average reminder interval and the most common tip category.
2. Inference: map a rolling adherence % and the workout intensity to an
   interval (minutes) and a user-facing tip.

The trained table is built once at start-up and never mutated afterwards.
"""

LOW_ADHERENCE_LIMIT = 60
HIGH_ADHERENCE_LIMIT = 100

DEFAULT_INTENSITY = "moderate"
DEFAULT_BUCKET = "medium"

TIP_TEXTS = {
    "low": "You usually don't reach your water goal. Try drinking a small glass every time you check your phone.",
    "medium": "You are close to your water goal most days. One extra cup in the afternoon could help you hit 100%.",
    "high": "You regularly meet your water goal. Great job! Keep your current routine going.",
}


class EmptyTrainingDatasetError(ValueError):
    """Raised when the model is trained on zero rows."""


class ModelCell(NamedTuple):
    interval: int
    tip_category: str


class HydrationDecision(NamedTuple):
    interval: int
    tip_category: str
    tip_text: str


def bucket_for_adherence(adherence_percent: float) -> str:
    """Bucket adherence into behaviour groups. Shared by training and inference."""
    if adherence_percent < LOW_ADHERENCE_LIMIT:
        return "low"
    if adherence_percent < HIGH_ADHERENCE_LIMIT:
        return "medium"
    return "high"


def _round_half_up(value: float) -> int:
    # Python's round() is banker's rounding; reminder intervals round .5 up
    return int(math.floor(value + 0.5))


def _most_common(categories: list) -> str:
    # Counter keeps first-seen order, so ties resolve to the earliest category
    counts = Counter(categories)
    best = max(counts.values())
    return next(cat for cat, n in counts.items() if n == best)


def train_hydration_model(rows: Iterable[TrainingRow] = HYDRATION_TRAINING_DATA) -> Mapping[str, Mapping[str, ModelCell]]:
    """
    TRAINING STEP
    Reads the dataset and learns, for each (intensity, bucket) pair:
      * average reminder interval (rounded)
      * most common tip category

    Output shape:
    {
      "light":    {"low": ModelCell, "medium": ModelCell, "high": ModelCell},
      "moderate": {...},
      "intense":  {...},
    }
    """
    grouped: Dict[str, Dict[str, Dict[str, list]]] = defaultdict(dict)

    row_count = 0
    for row in rows:
        row_count += 1
        bucket = bucket_for_adherence(row.adherence_percent)
        group = grouped[row.intensity].setdefault(bucket, {"intervals": [], "tips": []})
        group["intervals"].append(row.recommended_interval)
        group["tips"].append(row.tip_category)

    if row_count == 0:
        raise EmptyTrainingDatasetError("Hydration model cannot be trained on an empty dataset.")

    model = {}
    for intensity, buckets in grouped.items():
        cells = {}
        for bucket, group in buckets.items():
            avg_interval = sum(group["intervals"]) / len(group["intervals"])
            cells[bucket] = ModelCell(
                interval=_round_half_up(avg_interval),
                tip_category=_most_common(group["tips"]),
            )
        model[intensity] = MappingProxyType(cells)

    logger.info(f"[HydrationModel] Trained on {row_count} rows: {len(model)} intensities")
    return MappingProxyType(model)


class HydrationDecisionModel:
    """
    Read-only wrapper around a trained table.
    Safe to share between requests and threads.
    """

    def __init__(self, table: Mapping[str, Mapping[str, ModelCell]]):
        if not table:
            raise EmptyTrainingDatasetError("Hydration model table is empty.")
        self._table = table

    @classmethod
    def train(cls, rows: Optional[Iterable[TrainingRow]] = None) -> "HydrationDecisionModel":
        return cls(train_hydration_model(HYDRATION_TRAINING_DATA if rows is None else rows))

    @property
    def table(self) -> Mapping[str, Mapping[str, ModelCell]]:
        return self._table

    def lookup(self, adherence_percent: float, workout_intensity: Optional[str]) -> ModelCell:
        """
        Graceful lookup: exact intensity -> "moderate" -> first intensity,
        then exact bucket -> "medium" -> first bucket.
        """
        intensity_model = (
            self._table.get(workout_intensity)
            or self._table.get(DEFAULT_INTENSITY)
            or next(iter(self._table.values()))
        )
        bucket = bucket_for_adherence(adherence_percent)
        return (
            intensity_model.get(bucket)
            or intensity_model.get(DEFAULT_BUCKET)
            or next(iter(intensity_model.values()))
        )

    def decide(self, adherence_percent: float, workout_intensity: Optional[str]) -> HydrationDecision:
        """
        INFERENCE STEP
        Given the average adherence % and the workout intensity,
        returns the reminder interval (minutes) and the tip text.
        """
        cell = self.lookup(adherence_percent, workout_intensity)
        tip_text = TIP_TEXTS.get(cell.tip_category, TIP_TEXTS["high"])
        return HydrationDecision(interval=cell.interval, tip_category=cell.tip_category, tip_text=tip_text)
