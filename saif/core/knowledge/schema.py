"""
Schema-aware deserialization for the training knowledge document.

Each model has an explicit mapping table from JSON key to attribute name.
Parsing walks the document table by table and checks every key it needs,
so a schema mismatch is reported with the exact path that broke instead
of surfacing later as an AttributeError deep inside a lookup.

The functions here never touch the file system. Reading the document is
the loader's job (see infrastructure.knowledge).
"""

from typing import Any, Callable, Mapping, Optional, TypeVar

from .models import (
    Effectiveness,
    ExerciseDetail,
    ExerciseOrderingResearch,
    ExerciseSubstitution,
    GeneralPrinciples,
    GoalVolume,
    MuscleGroupExercises,
    MuscleGroupVolume,
    TrainingKnowledge,
    VolumeLandmarks,
)

T = TypeVar("T")


class KnowledgeSchemaError(Exception):
    """Raised when the knowledge document does not match the expected schema."""

    def __init__(self, path: str, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path


# ---------------------------------------------------------------------------
# Field-name mapping tables (JSON key -> attribute)
# ---------------------------------------------------------------------------

EFFECTIVENESS_FIELDS = {
    "hypertrophy": "hypertrophy",
    "strength": "strength",
    "power": "power",
}

EXERCISE_DETAIL_FIELDS = {
    "name": "name",
    "EMG_activation": "emg_activation",
    "injury_risk": "injury_risk",
    "equipment": "equipment",
    "prerequisites": "prerequisites",
    "progression_path": "progression_path",
}
EXERCISE_DETAIL_OPTIONAL_FIELDS = {
    "when_to_prioritize": "when_to_prioritize",
}

SUBSTITUTION_FIELDS = {
    "scenario": "scenario",
    "substitute": "substitute",
    "notes": "notes",
}

ORDERING_RESEARCH_FIELDS = {
    "optimal_sequence": "optimal_sequence",
    "fatigue_management": "fatigue_management",
    "compound_vs_isolation_timing": "compound_vs_isolation_timing",
}

VOLUME_LANDMARK_FIELDS = {
    "MV": "mv",
    "MEV": "mev",
    "MAV": "mav",
    "MRV": "mrv",
    "sets_per_session_range": "sets_per_session_range",
    "exercises_per_session": "exercises_per_session",
    "frequency_recommendation": "frequency_recommendation",
    "rest_between_sets": "rest_between_sets",
    "rep_range": "rep_range",
    "intensity_guidance": "intensity_guidance",
    "progression_rate": "progression_rate",
    "recovery_notes": "recovery_notes",
    "notes": "notes",
}

GENERAL_PRINCIPLES_FIELDS = {
    "volume_progression": "volume_progression",
    "deload_frequency": "deload_frequency",
    "individual_variation": "individual_variation",
}

MUSCLE_GROUP_LIST_FIELDS = {
    "top_compound_exercises": "top_compound_exercises",
    "top_accessory_exercises": "top_accessory_exercises",
    "exercise_substitutions": "exercise_substitutions",
}

EXERCISE_SELECTION_GROUPS = ("chest", "back", "shoulders", "quads")
GOAL_KEYS = ("bulk", "cut", "maintain")
LEVEL_KEYS = ("beginner", "intermediate", "advanced")


# ---------------------------------------------------------------------------
# Primitive readers
# ---------------------------------------------------------------------------

def _require_mapping(value: Any, path: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise KnowledgeSchemaError(path, f"expected object, got {type(value).__name__}")
    return value


def _require_list(value: Any, path: str) -> list:
    if not isinstance(value, list):
        raise KnowledgeSchemaError(path, f"expected array, got {type(value).__name__}")
    return value


def _require_key(data: Mapping[str, Any], key: str, path: str) -> Any:
    if key not in data:
        raise KnowledgeSchemaError(f"{path}.{key}", "missing required key")
    return data[key]


def _require_str(value: Any, path: str) -> str:
    if not isinstance(value, str):
        raise KnowledgeSchemaError(path, f"expected string, got {type(value).__name__}")
    return value


def _map_strings(
    data: Mapping[str, Any],
    table: Mapping[str, str],
    path: str,
    optional: Optional[Mapping[str, str]] = None,
) -> dict[str, Optional[str]]:
    """Read every string field named in a mapping table."""
    values: dict[str, Optional[str]] = {}
    for json_key, attribute in table.items():
        values[attribute] = _require_str(
            _require_key(data, json_key, path), f"{path}.{json_key}"
        )
    for json_key, attribute in (optional or {}).items():
        raw = data.get(json_key)
        values[attribute] = None if raw is None else _require_str(raw, f"{path}.{json_key}")
    return values


def _parse_list(
    value: Any,
    path: str,
    parse_item: Callable[[Any, str], T],
) -> tuple[T, ...]:
    items = _require_list(value, path)
    return tuple(parse_item(item, f"{path}[{index}]") for index, item in enumerate(items))


# ---------------------------------------------------------------------------
# Model parsers
# ---------------------------------------------------------------------------

def parse_effectiveness(value: Any, path: str) -> Effectiveness:
    data = _require_mapping(value, path)
    return Effectiveness(**_map_strings(data, EFFECTIVENESS_FIELDS, path))


def parse_exercise_detail(value: Any, path: str) -> ExerciseDetail:
    data = _require_mapping(value, path)
    fields = _map_strings(
        data, EXERCISE_DETAIL_FIELDS, path, optional=EXERCISE_DETAIL_OPTIONAL_FIELDS
    )
    effectiveness = parse_effectiveness(
        _require_key(data, "effectiveness", path), f"{path}.effectiveness"
    )
    return ExerciseDetail(effectiveness=effectiveness, **fields)


def parse_substitution(value: Any, path: str) -> ExerciseSubstitution:
    data = _require_mapping(value, path)
    return ExerciseSubstitution(**_map_strings(data, SUBSTITUTION_FIELDS, path))


def parse_muscle_group_exercises(value: Any, path: str) -> MuscleGroupExercises:
    data = _require_mapping(value, path)
    parsers = {
        "top_compound_exercises": parse_exercise_detail,
        "top_accessory_exercises": parse_exercise_detail,
        "exercise_substitutions": parse_substitution,
    }
    lists = {}
    for json_key, attribute in MUSCLE_GROUP_LIST_FIELDS.items():
        lists[attribute] = _parse_list(
            _require_key(data, json_key, path), f"{path}.{json_key}", parsers[json_key]
        )
    return MuscleGroupExercises(**lists)


def parse_ordering_research(value: Any, path: str) -> ExerciseOrderingResearch:
    data = _require_mapping(value, path)
    return ExerciseOrderingResearch(**_map_strings(data, ORDERING_RESEARCH_FIELDS, path))


def parse_volume_landmarks(value: Any, path: str) -> VolumeLandmarks:
    data = _require_mapping(value, path)
    fields = _map_strings(data, VOLUME_LANDMARK_FIELDS, path)
    sources = _parse_list(
        _require_key(data, "sources", path), f"{path}.sources", _require_str
    )
    return VolumeLandmarks(sources=sources, **fields)


def parse_goal_volume(value: Any, path: str) -> GoalVolume:
    data = _require_mapping(value, path)
    levels = {
        level: parse_volume_landmarks(_require_key(data, level, path), f"{path}.{level}")
        for level in LEVEL_KEYS
    }
    return GoalVolume(**levels)


def parse_muscle_group_volume(value: Any, path: str) -> MuscleGroupVolume:
    data = _require_mapping(value, path)
    goals = {
        goal: parse_goal_volume(_require_key(data, goal, path), f"{path}.{goal}")
        for goal in GOAL_KEYS
    }
    return MuscleGroupVolume(**goals)


def parse_general_principles(value: Any, path: str) -> GeneralPrinciples:
    data = _require_mapping(value, path)
    return GeneralPrinciples(**_map_strings(data, GENERAL_PRINCIPLES_FIELDS, path))


def parse_training_knowledge(document: Any) -> TrainingKnowledge:
    """
    Build the typed knowledge base from a decoded JSON document.

    Raises:
        KnowledgeSchemaError: if any required key is missing or has the
            wrong type. The error path points at the offending key.
    """
    root = _require_mapping(document, "$")
    schema_version = _require_str(
        _require_key(root, "schema_version", "$"), "$.schema_version"
    )

    selection = _require_mapping(
        _require_key(root, "exercise_selection", "$"), "$.exercise_selection"
    )
    muscle_groups = {
        group: parse_muscle_group_exercises(
            _require_key(selection, group, "$.exercise_selection"),
            f"$.exercise_selection.{group}",
        )
        for group in EXERCISE_SELECTION_GROUPS
    }
    ordering = parse_ordering_research(
        _require_key(selection, "exercise_ordering_research", "$.exercise_selection"),
        "$.exercise_selection.exercise_ordering_research",
    )

    guidelines = _require_mapping(
        _require_key(root, "volume_guidelines", "$"), "$.volume_guidelines"
    )
    volume_guidelines = {
        str(group).lower(): parse_muscle_group_volume(value, f"$.volume_guidelines.{group}")
        for group, value in guidelines.items()
    }

    general_principles = parse_general_principles(
        _require_key(root, "general_principles", "$"), "$.general_principles"
    )

    return TrainingKnowledge(
        schema_version=schema_version,
        muscle_groups=muscle_groups,
        exercise_ordering_research=ordering,
        volume_guidelines=volume_guidelines,
        general_principles=general_principles,
    )
