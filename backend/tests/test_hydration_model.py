import unittest
from types import MappingProxyType

from app.data.hydration_training_data import HYDRATION_TRAINING_DATA, TrainingRow
from app.services.hydration_model import (
    TIP_TEXTS,
    EmptyTrainingDatasetError,
    HydrationDecisionModel,
    ModelCell,
    bucket_for_adherence,
    train_hydration_model,
)


class TestBuckets(unittest.TestCase):

    def test_boundaries(self):
        self.assertEqual(bucket_for_adherence(59.999), "low")
        self.assertEqual(bucket_for_adherence(60), "medium")
        self.assertEqual(bucket_for_adherence(99.999), "medium")
        self.assertEqual(bucket_for_adherence(100), "high")
        self.assertEqual(bucket_for_adherence(0), "low")
        self.assertEqual(bucket_for_adherence(250), "high")


class TestTraining(unittest.TestCase):

    def test_trained_table_from_dataset(self):
        table = train_hydration_model(HYDRATION_TRAINING_DATA)

        self.assertEqual(set(table.keys()), {"light", "moderate", "intense"})
        self.assertEqual(table["moderate"]["low"], ModelCell(45, "low"))
        self.assertEqual(table["moderate"]["medium"], ModelCell(45, "medium"))
        self.assertEqual(table["moderate"]["high"], ModelCell(60, "high"))
        self.assertEqual(table["light"]["high"], ModelCell(75, "high"))
        self.assertEqual(table["intense"]["low"], ModelCell(30, "low"))

    def test_table_is_read_only(self):
        table = train_hydration_model()
        self.assertIsInstance(table, MappingProxyType)
        with self.assertRaises(TypeError):
            table["moderate"] = {}
        with self.assertRaises(TypeError):
            table["moderate"]["low"] = ModelCell(1, "low")

    def test_empty_dataset_raises(self):
        with self.assertRaises(EmptyTrainingDatasetError):
            train_hydration_model([])
        with self.assertRaises(ValueError):
            HydrationDecisionModel.train([])

    def test_mean_rounds_half_up(self):
        rows = [
            TrainingRow(10, "light", 30, "low"),
            TrainingRow(20, "light", 31, "low"),
        ]
        table = train_hydration_model(rows)
        self.assertEqual(table["light"]["low"].interval, 31)

    def test_mode_tie_goes_to_first_seen(self):
        rows = [
            TrainingRow(70, "intense", 30, "medium"),
            TrainingRow(75, "intense", 30, "low"),
        ]
        table = train_hydration_model(rows)
        self.assertEqual(table["intense"]["medium"].tip_category, "medium")


class TestDecide(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        cls.model = HydrationDecisionModel.train()

    def test_moderate_low_adherence(self):
        decision = self.model.decide(30, "moderate")
        self.assertEqual(decision.interval, 45)
        self.assertEqual(decision.tip_category, "low")
        self.assertEqual(decision.tip_text, TIP_TEXTS["low"])

    def test_unknown_intensity_matches_moderate(self):
        for adherence in (10, 60, 85, 100, 140):
            self.assertEqual(self.model.decide(adherence, "extreme"), self.model.decide(adherence, "moderate"))
        self.assertEqual(self.model.decide(50, None), self.model.decide(50, "moderate"))

    def test_high_adherence_light(self):
        decision = self.model.decide(120, "light")
        self.assertEqual(decision.interval, 75)
        self.assertEqual(decision.tip_text, TIP_TEXTS["high"])

    def test_missing_bucket_uses_medium_then_first(self):
        table = train_hydration_model([
            TrainingRow(70, "light", 50, "medium"),
            TrainingRow(10, "light", 70, "low"),
        ])
        model = HydrationDecisionModel(table)
        # No "high" cell for light -> medium
        self.assertEqual(model.decide(120, "light").interval, 50)

        only_low = HydrationDecisionModel(train_hydration_model([TrainingRow(10, "light", 70, "low")]))
        self.assertEqual(only_low.decide(120, "intense").interval, 70)

    def test_unknown_tip_category_uses_high_text(self):
        model = HydrationDecisionModel(train_hydration_model([TrainingRow(10, "light", 70, "mystery")]))
        decision = model.decide(10, "light")
        self.assertEqual(decision.tip_category, "mystery")
        self.assertEqual(decision.tip_text, TIP_TEXTS["high"])


if __name__ == '__main__':
    unittest.main()
