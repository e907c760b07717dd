"""Parser for tabular workout program imports.

Handles parsing workout programs from comma-separated text with a fixed
17-column positional layout:

    Type, Durée, Echauffement, Exercices échauffement,
    Exercice 1, Série Ex 1, ..., Exercice 6, Série Ex 6, Abdominaux

Each row becomes one DayPlan. Exercise semantics (sets, reps, cadence, bike
mode) are inferred from the free text of the cells. Malformed rows are
skipped; the parser never raises.
"""

from __future__ import annotations

import re

from loguru import logger

from companion.workouts.models import ABS_REPS, DayPlan, Exercise, ExerciseCategory, ExerciseMode

CSV_HEADER = (
    "Type,Durée,Echauffement,Exercices échauffement,"
    "Exercice 1,Série Ex 1,Exercice 2,Série Ex 2,Exercice 3,Série Ex 3,"
    "Exercice 4,Série Ex 4,Exercice 5,Série Ex 5,Exercice 6,Série Ex 6,Abdominaux"
)

SAMPLE_CSV = f"""{CSV_HEADER}
Musculation 1,1h15,Echauffement,Rameur 10min + Mobilisations articulaires,Développé Couché,3 séries de 10 répétitions (1min récup),Squat,3 séries de 10 répétitions (1m30 récup),Tirage Poitrine,3 séries de 12 répétitions (1min récup),Développé Militaire,3 séries de 10 répétitions (1min récup),Leg Extension,3 séries de 15 répétitions,Curl Biceps,3 séries de 12 répétitions,Gainage face + côtés (3 tours)
Hometrainer Force,50min,Echauffement,10min souple à 90rpm,Force sous-max,4 séries de 5min à 60rpm,Vélocité,4 séries de 2min à 110rpm,,,,,,,,Abdos crunchs 3x20
Vélo Route,1h30,Echauffement,20min progressif,Endurance,1h à 140bpm,,,,,,,,,,Etirements"""

MIN_FIELDS = 5
EXERCISE_SLOTS = 6
FIRST_SLOT_FIELD = 4
WARMUP_FIELD = 3
ABS_FIELD = 16

DEFAULT_DURATION = "1h"
DEFAULT_SETS = 3
DEFAULT_REPS = "10"
NO_WARMUP_TEXT = "Aucun échauffement précisé"
WARMUP_NAME = "Échauffement"
ABS_NAME = "Abdominaux"

BIKE_WARMUP_REPS = "10min"
BIKE_WARMUP_DURATION = "10"
STANDARD_WARMUP_REPS = "0"

HEADER_MARKER = "type"

# Cycling vocabulary, matched anywhere in the plan name
BIKE_PATTERN = re.compile(r"bike|vélo|velo|hometrainer|home-trainer|home trainer|cycling|cyclisme", re.IGNORECASE)

SETS_PATTERN = re.compile(r"(\d+)\s*(?:séries?|series?|sets?)", re.IGNORECASE)
MINUTES_PATTERN = re.compile(r"(\d+)\s*(?:minutes?|min)", re.IGNORECASE)
REPS_PATTERN = re.compile(r"(\d+(?:-\d+)?)\s*(?:répétitions?|repetitions?|reps?)", re.IGNORECASE)
CADENCE_PATTERN = re.compile(r"(\d+)\s*rpm", re.IGNORECASE)
QUOTE_PATTERN = re.compile(r'^"|"$')
WHITESPACE_PATTERN = re.compile(r"\s+")


def parse_sets_count(detail: str, default: int = DEFAULT_SETS) -> int:
    """Extract the set count from a detail cell.

    Examples:
        "3 séries de 10 répétitions" → 3
        "Gainage face" → default
    """
    match = SETS_PATTERN.search(detail)
    if match:
        count = int(match.group(1))
        if count > 0:
            return count
    return default


def parse_reps(detail: str) -> str:
    """Extract the reps or duration token from a detail cell.

    A minutes marker wins over a repetitions marker.

    Examples:
        "4 séries de 5min à 60rpm" → "5min"
        "3 séries de 8-12 reps" → "8-12"
        "1h à 140bpm" → "10"
    """
    time_match = MINUTES_PATTERN.search(detail)
    if time_match:
        return f"{time_match.group(1)}min"

    rep_match = REPS_PATTERN.search(detail)
    return rep_match.group(1) if rep_match else DEFAULT_REPS


def parse_cadence(detail: str) -> str | None:
    """Extract the target cadence (RPM) from a detail cell, if any."""
    match = CADENCE_PATTERN.search(detail)
    return match.group(1) if match else None


def is_bike_plan(plan_name: str) -> bool:
    """Check whether a plan name designates a cycling session."""
    return BIKE_PATTERN.search(plan_name) is not None


def _split_fields(line: str) -> list[str]:
    # No escaped-comma support: quotes are only stripped from the edges
    return [QUOTE_PATTERN.sub("", field.strip()).strip() for field in line.split(",")]


def _field(fields: list[str], index: int) -> str:
    return fields[index] if index < len(fields) else ""


def _plan_id(plan_name: str, line_index: int) -> str:
    return f"{WHITESPACE_PATTERN.sub('-', plan_name.lower())}-{line_index}"


def _is_header(first_line: str) -> bool:
    first_field = _split_fields(first_line)[0]
    return HEADER_MARKER in first_field.lower()


def _build_warmup(plan_id: str, details: str, mode: ExerciseMode) -> Exercise:
    is_bike = mode == ExerciseMode.BIKE
    return Exercise(
        id=f"{plan_id}-warmup",
        name=WARMUP_NAME,
        category=ExerciseCategory.WARMUP,
        mode=mode,
        sets=1,
        reps=BIKE_WARMUP_REPS if is_bike else STANDARD_WARMUP_REPS,
        target_duration=BIKE_WARMUP_DURATION if is_bike else None,
        target_cadence=parse_cadence(details) if is_bike else None,
        description=details,
    )


def _build_strength(plan_id: str, slot: int, name: str, details: str, mode: ExerciseMode) -> Exercise:
    is_bike = mode == ExerciseMode.BIKE
    return Exercise(
        id=f"{plan_id}-ex-{slot}",
        name=name,
        category=ExerciseCategory.STRENGTH,
        mode=mode,
        # Bike sessions are logged as one aggregate entry whatever the description says
        sets=1 if is_bike else parse_sets_count(details),
        reps=parse_reps(details),
        target_cadence=parse_cadence(details) if is_bike else None,
        description=details,
    )


def _build_abs(plan_id: str, details: str) -> Exercise:
    return Exercise(
        id=f"{plan_id}-abs",
        name=ABS_NAME,
        category=ExerciseCategory.ABS,
        mode=ExerciseMode.STANDARD,
        sets=1,
        reps=ABS_REPS,
        description=details,
    )


def _parse_plan_line(line: str, line_index: int) -> DayPlan | None:
    """Parse a single row into a DayPlan.

    Args:
        line: Raw row text
        line_index: Index of the row among non-empty lines (header included)

    Returns:
        Parsed plan or None if the row is malformed
    """
    fields = _split_fields(line)
    if len(fields) < MIN_FIELDS:
        logger.debug(f"Skipping row {line_index}: {len(fields)} fields (need {MIN_FIELDS})")
        return None

    plan_name = fields[0] or f"Programme {line_index}"
    duration = fields[1] or DEFAULT_DURATION
    warmup_details = _field(fields, WARMUP_FIELD) or NO_WARMUP_TEXT
    abs_details = _field(fields, ABS_FIELD)

    mode = ExerciseMode.BIKE if is_bike_plan(plan_name) else ExerciseMode.STANDARD
    plan_id = _plan_id(plan_name, line_index)

    exercises: list[Exercise] = [_build_warmup(plan_id, warmup_details, mode)]

    for slot in range(EXERCISE_SLOTS):
        name = _field(fields, FIRST_SLOT_FIELD + 2 * slot)
        if not name:
            continue
        details = _field(fields, FIRST_SLOT_FIELD + 2 * slot + 1)
        exercises.append(_build_strength(plan_id, slot + 1, name, details, mode))

    if abs_details:
        exercises.append(_build_abs(plan_id, abs_details))

    return DayPlan(id=plan_id, name=plan_name, duration=duration, exercises=tuple(exercises))


def parse_plan_csv(content: str) -> list[DayPlan]:
    """Parse tabular program text into day plans.

    Args:
        content: Comma-separated text, optionally starting with a header row

    Returns:
        Day plans in row order (possibly empty; malformed rows are skipped)
    """
    # Rows end at "\n" only; a trailing "\r" is removed by the field strip
    lines = [line for line in content.split("\n") if line.strip()]
    if not lines:
        logger.info("Plan import: empty content, no plans parsed")
        return []

    start_index = 1 if _is_header(lines[0]) else 0
    plans: list[DayPlan] = []

    for line_index in range(start_index, len(lines)):
        try:
            plan = _parse_plan_line(lines[line_index], line_index)
        except ValueError as e:
            # pydantic ValidationError subclasses ValueError
            logger.warning(f"Skipping row {line_index}: {e}")
            continue
        if plan is not None:
            plans.append(plan)

    logger.info(f"Plan import: parsed {len(plans)} plans from {len(lines) - start_index} rows")
    return plans
