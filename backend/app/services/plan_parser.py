import logging
import re
from typing import Any, List, NamedTuple, Optional

from app.schemas.workout_plan import (
    DEFAULT_PLAN_NAME,
    FALLBACK_SUMMARY,
    SUMMARY_MAX_LENGTH,
    Exercise,
    WorkoutDay,
    WorkoutPlan,
)

logger = logging.getLogger(__name__)

"""
Workout Plan Parser
-------------------
Turns the markdown-ish plan text returned by the LLM into a WorkoutPlan.
Scan order: title -> summary -> day sections -> (per day) warm-up,
exercises, cool-down -> additional tips.

Section boundaries are found by walking marker positions in document order;
regexes are only used for the leaf tokens (labels, numbers, names).
The parser never raises: anything unexpected yields the fallback plan.

Expected input (loosely):
    ## Plan Title
    **Summary:** ...
    ### Day 1: Upper Body (~60 minutes)
    **Warm-up:** ...
    **Exercises:**
    1. **Bench Press** - 4 sets x 8-10 reps, Rest: 90 seconds
       - Notes: ...
    **Cool-down:** ...
    **Additional Tips:**
    - ...
"""

DAYS_IN_WEEK = 7

# --- Structural markers ---
TITLE_RE = re.compile(r"^[ \t]*##(?!#)[ \t]*([^\n]*)$", re.MULTILINE)
HEADING_RE = re.compile(r"^[ \t]*#{1,6}[ \t]", re.MULTILINE)
RULE_RE = re.compile(r"^[ \t]*(?:-{3,}|\*{3,}|_{3,})[ \t]*$", re.MULTILINE)
BOLD_LABEL_RE = re.compile(r"\*\*[^*\n]+?:[ \t]*\*\*|\*\*[^*\n]+?\*\*[ \t]*:")
# `### Day 1:`, `> Day 1:` or `**Day 1: ...**`; a `* Day 1` bullet is a list item, not a marker
DAY_MARKER_RE = re.compile(
    r"^[ \t]*(?:#{1,6}[ \t]*|>[ \t]*)?(?:(?:\*\*|__)[ \t]*)?Day[ \t]+(\d+)[ \t*_]*(?:[:\-–—](.*))?$",
    re.IGNORECASE | re.MULTILINE,
)
DURATION_RE = re.compile(r"\([ \t]*(?:~[ \t]*)?(\d+)[ \t]*(?:[-–][ \t]*\d+[ \t]*)?min", re.IGNORECASE)


def _label_re(names: str) -> "re.Pattern":
    """
    A label at the start of a line. Either carries a colon (`**Warm-up:**`,
    `- Warm-up (10 min):`) or is a heading/bold line on its own (`#### Warm-up`).
    """
    return re.compile(
        r"^[ \t#>*_\-]*(?:" + names + r")\b[^\n:]*:[ \t*_]*"
        r"|^[ \t]*(?:#{1,6}[ \t]*|\*\*)(?:" + names + r")\b[^\n:]*$",
        re.IGNORECASE | re.MULTILINE,
    )


SUMMARY_LABEL_RE = re.compile(r"\*\*[ \t]*Summary[ \t]*(?::[ \t]*)?\*\*[ \t]*:?|^[ \t#]*Summary[ \t]*:", re.IGNORECASE | re.MULTILINE)
WARMUP_LABEL_RE = _label_re(r"warm[ \-]?ups?")
EXERCISES_LABEL_RE = _label_re(r"(?:main[ \t]+)?(?:exercises|workout|strength[ \t]+training|circuit)")
COOLDOWN_LABEL_RE = _label_re(r"cool[ \-]?downs?")
ADDITIONAL_LABEL_RE = _label_re(r"additional")
TIPS_LABEL_RE = _label_re(r"additional[ \t]+tips")

# --- Leaf tokens ---
EXERCISE_LINE_RE = re.compile(r"^[ \t]*\d+\.[ \t]*\*\*(.+?)\*\*[ \t]*[-–—:]?[ \t]*(.*)$", re.MULTILINE)
SETS_RE = re.compile(r"(?<!\d)(\d+)[ \t]*sets?\b", re.IGNORECASE)
REPS_RE = re.compile(r"(?:^|[\s\d])[×xX][ \t]*(\d+(?:[ \t]*[-–][ \t]*\d+)?)")
REST_RE = re.compile(r"Rest[ \t]*(?::[ \t]*)?(\d+)[ \t]*(?:seconds?|secs?|s)\b", re.IGNORECASE)
INLINE_NOTES_RE = re.compile(r"Notes?[ \t]*:[ \t]*(.+)$", re.IGNORECASE)
SUB_LINE_RE = re.compile(r"[ \t]+\S|[ \t]*(?:[-•]|\*(?!\*))[ \t]")
NOTES_LINE_RE = re.compile(r"(?:[-*•][ \t]*)?(?:\*\*|_)?Notes?[ \t]*(?::[ \t]*(?:\*\*|_)?|(?:\*\*|_)[ \t]*:)[ \t]*(.+)", re.IGNORECASE)
TIP_BULLET_RE = re.compile(r"^[ \t]*(?:[-•*]|\d+\.)[ \t]+", re.MULTILINE)


class _DaySpan(NamedTuple):
    day_number: int
    header: str
    start: int  # end of the marker line
    end: int


def _first_index(text: str, patterns, start: int, end: int) -> int:
    """Earliest match start of any pattern inside text[start:end], else `end`."""
    best = end
    for pattern in patterns:
        match = pattern.search(text, start, end)
        if match and match.start() < best:
            best = match.start()
    return best


def _clean_block(text: str) -> str:
    lines = [line.strip() for line in text.splitlines()]
    return "\n".join(line for line in lines if line and not RULE_RE.fullmatch(line))


def _strip_markup(text: str) -> str:
    return text.strip().strip("*_#").strip()


def coerce_days_per_week(value: Any) -> Optional[int]:
    """Accepts 4, "4", " 4 ", 4.0; anything else is treated as absent."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    match = re.fullmatch(r"\s*(\d+)(?:\.0+)?\s*", str(value))
    return int(match.group(1)) if match else None


def compute_rest_days(days_per_week: Optional[int], parsed_day_count: int) -> List[int]:
    """Days (days_per_week + 1) .. 7; falls back to the number of parsed day sections."""
    workout_days = days_per_week if days_per_week is not None else parsed_day_count
    workout_days = max(0, min(workout_days, DAYS_IN_WEEK))
    return list(range(workout_days + 1, DAYS_IN_WEEK + 1))


# --- Scan steps ---

def _extract_title(text: str) -> str:
    for match in TITLE_RE.finditer(text):
        title = _strip_markup(match.group(1).rstrip(" \t#"))
        if title:
            return title
    return DEFAULT_PLAN_NAME


def _extract_summary(text: str) -> str:
    label = SUMMARY_LABEL_RE.search(text)
    if not label:
        return ""
    start = label.end()
    end = _first_index(text, (BOLD_LABEL_RE, HEADING_RE, RULE_RE, DAY_MARKER_RE), start, len(text))
    summary = " ".join(text[start:end].split())
    return summary[:SUMMARY_MAX_LENGTH]


def _find_day_spans(text: str):
    """
    Sequential scan over the day markers. Each day runs to the next marker;
    the last one stops at the trailing tips label (if any) or the end of text.
    Returns (spans, tips_label_match).
    """
    markers = list(DAY_MARKER_RE.finditer(text))
    tips_label = TIPS_LABEL_RE.search(text, markers[-1].end() if markers else 0)
    body_end = tips_label.start() if tips_label else len(text)

    spans = []
    for i, marker in enumerate(markers):
        end = markers[i + 1].start() if i + 1 < len(markers) else body_end
        spans.append(_DaySpan(int(marker.group(1)), marker.group(2) or "", marker.end(), end))
    return spans, tips_label


def _parse_day_header(header: str):
    duration_match = DURATION_RE.search(header)
    duration = int(duration_match.group(1)) if duration_match else 0
    focus = header[:duration_match.start()] if duration_match else header
    return _strip_markup(focus), duration


def _extract_warmup(section: str) -> str:
    label = WARMUP_LABEL_RE.search(section)
    if not label:
        return ""
    start = label.end()
    end = _first_index(
        section,
        (EXERCISES_LABEL_RE, EXERCISE_LINE_RE, COOLDOWN_LABEL_RE, HEADING_RE, RULE_RE),
        start,
        len(section),
    )
    return _clean_block(section[start:end])


def _extract_cooldown(section: str) -> str:
    label = COOLDOWN_LABEL_RE.search(section)
    if not label:
        return ""
    start = label.end()
    end = _first_index(section, (HEADING_RE, RULE_RE, ADDITIONAL_LABEL_RE), start, len(section))
    return _clean_block(section[start:end])


def _exercise_region(section: str) -> str:
    """
    From the exercises label (or the first numbered line after the warm-up)
    up to the cool-down label. A label below the numbered lines, such as
    `- Circuit finisher: burpees`, does not open the region.
    """
    warmup = WARMUP_LABEL_RE.search(section)
    first_line = EXERCISE_LINE_RE.search(section, warmup.end() if warmup else 0)
    first_start = first_line.start() if first_line else len(section)

    label = EXERCISES_LABEL_RE.search(section, 0, first_start)
    start = label.end() if label else first_start

    cooldown = COOLDOWN_LABEL_RE.search(section, start)
    end = cooldown.start() if cooldown else len(section)
    return section[start:end]


def _find_notes(block: str, details: str) -> str:
    """
    Notes for one exercise: inline in its details, else a Notes line among the
    indented or bulleted lines directly under it. `block` runs from the end of
    the exercise line to the next numbered line.
    """
    inline = INLINE_NOTES_RE.search(details)
    if inline:
        return inline.group(1).strip()

    for line in block.splitlines()[1:]:
        if not line.strip():
            continue
        if not SUB_LINE_RE.match(line):
            break
        match = NOTES_LINE_RE.match(line.strip())
        if match:
            return _strip_markup(match.group(1))
    return ""


def _extract_exercises(section: str) -> List[Exercise]:
    region = _exercise_region(section)
    exercises = []
    matches = list(EXERCISE_LINE_RE.finditer(region))
    for i, match in enumerate(matches):
        name = match.group(1).strip().rstrip(":").strip()
        if not name:
            continue
        details = match.group(2)
        block_end = matches[i + 1].start() if i + 1 < len(matches) else len(region)

        sets = SETS_RE.search(details)
        reps = REPS_RE.search(details)
        rest = REST_RE.search(details)

        exercises.append(Exercise(
            name=name,
            sets=sets.group(1) if sets else "",
            reps=re.sub(r"\s+", "", reps.group(1)).replace("–", "-") if reps else "",
            rest=f"{rest.group(1)} seconds" if rest else "",
            notes=_find_notes(region[match.end():block_end], details),
        ))
    return exercises


def _extract_tips(text: str, tips_label) -> List[str]:
    if not tips_label:
        return []
    start = tips_label.end()
    end = _first_index(text, (HEADING_RE, RULE_RE), start, len(text))
    block = text[start:end]

    if not TIP_BULLET_RE.search(block):
        single = " ".join(block.split())
        return [single] if single else []

    # Text before the first bullet is an intro line, not a tip
    items = TIP_BULLET_RE.split(block)[1:]
    return [" ".join(item.split()) for item in items if item.strip()]


def build_fallback_plan(raw_text: str, days_per_week: Any = None) -> WorkoutPlan:
    """Minimal, always-valid plan that keeps the original text."""
    workout_days = coerce_days_per_week(days_per_week)
    return WorkoutPlan(
        plan_name=DEFAULT_PLAN_NAME,
        structure=DEFAULT_PLAN_NAME,
        summary=FALLBACK_SUMMARY,
        full_plan=raw_text,
        weekly_schedule=[],
        rest_days=compute_rest_days(workout_days, 0) if workout_days is not None else [],
        tips=[],
    )


def _parse(text: str, days_per_week: Any) -> WorkoutPlan:
    # 1. Title
    title = _extract_title(text)

    # 2. Summary
    summary = _extract_summary(text)

    # 3. Day sections
    spans, tips_label = _find_day_spans(text)
    if not spans:
        logger.warning("[PlanParser] No day sections found. Using fallback plan.")
        return build_fallback_plan(text, days_per_week)

    # 4-5. Warm-up, exercises, cool-down per day (document order is kept)
    schedule = []
    for span in spans:
        section = text[span.start:span.end]
        focus, duration = _parse_day_header(span.header)
        schedule.append(WorkoutDay(
            day_number=span.day_number,
            day_name=f"Day {span.day_number}",
            focus=focus,
            duration=duration,
            exercises=_extract_exercises(section),
            warmup=_extract_warmup(section),
            cooldown=_extract_cooldown(section),
        ))

    # 6. Rest days
    rest_days = compute_rest_days(coerce_days_per_week(days_per_week), len(schedule))

    # 7. Tips
    tips = _extract_tips(text, tips_label)

    return WorkoutPlan(
        plan_name=title,
        structure=title,
        summary=summary,
        full_plan=text,
        weekly_schedule=schedule,
        rest_days=rest_days,
        tips=tips,
    )


def parse_workout_plan(raw_text: Any, days_per_week: Any = None) -> WorkoutPlan:
    """
    Parse an AI-generated workout plan. Total function: never raises.

    Args:
        raw_text: the LLM response text.
        days_per_week: the profile's workout days (int or numeric string), optional.
    """
    if raw_text is None:
        text = ""
    elif isinstance(raw_text, bytes):
        text = raw_text.decode("utf-8", errors="replace")
    else:
        text = str(raw_text)

    try:
        plan = _parse(text, days_per_week)
        logger.info(f"[PlanParser] Parsed '{plan.plan_name}': {len(plan.weekly_schedule)} days, {len(plan.tips)} tips")
        return plan
    except Exception as e:
        logger.warning(f"[PlanParser] Failed to parse workout plan, using fallback: {e}", exc_info=True)
        return build_fallback_plan(text, days_per_week)
