"""
Hydration Training Data
-----------------------
Fixed, versioned dataset used to build the hydration reminder model.
100 rows: three intensities x three adherence buckets. Rows are pre-bucketed:
"low" rows sit below 60%, "medium" rows in [60, 100), "high" rows at 100% or more.

Columns: (adherence_percent, intensity, recommended_interval_min, tip_category)
"""
from typing import NamedTuple


class TrainingRow(NamedTuple):
    adherence_percent: float
    intensity: str
    recommended_interval: int
    tip_category: str


HYDRATION_TRAINING_DATA_VERSION = "2024.1"

_ROWS = (
    # --- low adherence ---
    (24, "light", 60, "low"),
    (27, "light", 60, "low"),
    (30, "light", 60, "low"),
    (33, "light", 60, "low"),
    (36, "light", 60, "low"),
    (39, "light", 60, "low"),
    (42, "light", 60, "low"),
    (45, "light", 60, "low"),
    (48, "light", 60, "low"),
    (51, "light", 60, "low"),
    (54, "light", 60, "low"),
    (22, "moderate", 45, "low"),
    (26, "moderate", 45, "low"),
    (29, "moderate", 45, "low"),
    (32, "moderate", 45, "low"),
    (35, "moderate", 45, "low"),
    (38, "moderate", 45, "low"),
    (41, "moderate", 45, "low"),
    (44, "moderate", 45, "low"),
    (47, "moderate", 45, "low"),
    (50, "moderate", 45, "low"),
    (53, "moderate", 45, "low"),
    (23, "intense", 30, "low"),
    (25, "intense", 30, "low"),
    (28, "intense", 30, "low"),
    (31, "intense", 30, "low"),
    (34, "intense", 30, "low"),
    (37, "intense", 30, "low"),
    (40, "intense", 30, "low"),
    (43, "intense", 30, "low"),
    (46, "intense", 30, "low"),
    (49, "intense", 30, "low"),
    (52, "intense", 30, "low"),

    # --- medium adherence ---
    (62, "light", 60, "medium"),
    (65, "light", 60, "medium"),
    (68, "light", 60, "medium"),
    (71, "light", 60, "medium"),
    (74, "light", 60, "medium"),
    (77, "light", 60, "medium"),
    (80, "light", 60, "medium"),
    (83, "light", 60, "medium"),
    (86, "light", 60, "medium"),
    (89, "light", 60, "medium"),
    (92, "light", 60, "medium"),
    (61, "moderate", 45, "medium"),
    (64, "moderate", 45, "medium"),
    (67, "moderate", 45, "medium"),
    (70, "moderate", 45, "medium"),
    (73, "moderate", 45, "medium"),
    (76, "moderate", 45, "medium"),
    (79, "moderate", 45, "medium"),
    (82, "moderate", 45, "medium"),
    (85, "moderate", 45, "medium"),
    (88, "moderate", 45, "medium"),
    (91, "moderate", 45, "medium"),
    (63, "intense", 30, "medium"),
    (66, "intense", 30, "medium"),
    (69, "intense", 30, "medium"),
    (72, "intense", 30, "medium"),
    (75, "intense", 30, "medium"),
    (78, "intense", 30, "medium"),
    (81, "intense", 30, "medium"),
    (84, "intense", 30, "medium"),
    (87, "intense", 30, "medium"),
    (90, "intense", 30, "medium"),
    (93, "intense", 30, "medium"),

    # --- high adherence ---
    (102, "light", 75, "high"),
    (105, "light", 75, "high"),
    (108, "light", 75, "high"),
    (111, "light", 75, "high"),
    (114, "light", 75, "high"),
    (117, "light", 75, "high"),
    (120, "light", 75, "high"),
    (123, "light", 75, "high"),
    (126, "light", 75, "high"),
    (129, "light", 75, "high"),
    (132, "light", 75, "high"),
    (135, "light", 75, "high"),
    (101, "moderate", 60, "high"),
    (104, "moderate", 60, "high"),
    (107, "moderate", 60, "high"),
    (110, "moderate", 60, "high"),
    (113, "moderate", 60, "high"),
    (116, "moderate", 60, "high"),
    (119, "moderate", 60, "high"),
    (122, "moderate", 60, "high"),
    (125, "moderate", 60, "high"),
    (128, "moderate", 60, "high"),
    (131, "moderate", 60, "high"),
    (103, "intense", 45, "high"),
    (106, "intense", 45, "high"),
    (109, "intense", 45, "high"),
    (112, "intense", 45, "high"),
    (115, "intense", 45, "high"),
    (118, "intense", 45, "high"),
    (121, "intense", 45, "high"),
    (124, "intense", 45, "high"),
    (127, "intense", 45, "high"),
    (130, "intense", 45, "high"),
    (133, "intense", 45, "high"),
)

HYDRATION_TRAINING_DATA = tuple(TrainingRow(*row) for row in _ROWS)
