"""
Unit tests for the knowledge domain models and schema parsing.

Testing philosophy:
- Test behavior, not implementation
- Derived values must degrade to fixed defaults, never raise
- Schema errors must point at the key that broke
"""

import copy
import json

import pytest

from saif.core.knowledge.models import (
    Effectiveness,
    ExerciseDetail,
    ExerciseSubstitution,
    FitnessLevel,
    Goal,
    MuscleGroupExercises,
    SafetyLevel,
    VolumeLandmarks,
    effectiveness_rating,
    parse_range,
)
from saif.core.knowledge.schema import KnowledgeSchemaError, parse_training_knowledge
from saif.infrastructure.knowledge.loader import BUNDLED_DATASET


def make_exercise(name="Barbell Bench Press", injury_risk="Medium", **overrides):
    fields = dict(
        name=name,
        emg_activation="High pectoral activation.",
        effectiveness=Effectiveness(hypertrophy="High", strength="High", power="Low"),
        injury_risk=injury_risk,
        equipment="Barbell",
        prerequisites="None",
        progression_path="Push-up -> Bench",
    )
    fields.update(overrides)
    return ExerciseDetail(**fields)


def make_landmarks(mav="12-20 sets/week", exercises_per_session="3-4 exercises"):
    return VolumeLandmarks(
        mv="6 sets/week",
        mev="10 sets/week",
        mav=mav,
        mrv="22 sets/week",
        sets_per_session_range="6-10",
        exercises_per_session=exercises_per_session,
        frequency_recommendation="2x per week",
        rest_between_sets="2-3 minutes",
        rep_range="6-12",
        intensity_guidance="RPE 7-9",
        progression_rate="1 set per week",
        recovery_notes="48 hours",
    )


@pytest.fixture
def document():
    """A fresh copy of the bundled dataset for each test to mutate."""
    with open(BUNDLED_DATASET, "r", encoding="utf-8") as f:
        return json.load(f)


# ---------------------------------------------------------------------------
# Range parsing
# ---------------------------------------------------------------------------

class TestParseRange:
    """Tests for pulling numeric ranges out of research text."""

    def test_parses_dash_range(self):
        assert parse_range("12-18 sets/week") == (12, 18)

    def test_uses_first_two_numbers(self):
        assert parse_range("10 to 14 sets, up to 20") == (10, 14)

    def test_single_number_is_not_a_range(self):
        assert parse_range("8 sets/week") is None

    def test_no_numbers(self):
        assert parse_range("as many as you can recover from") is None

    def test_inverted_range_is_rejected(self):
        assert parse_range("20-12 sets") is None


class TestVolumeLandmarks:
    """Tests for numeric views over landmark text."""

    def test_sets_per_week_range_from_mav(self):
        assert make_landmarks(mav="12-20 sets/week").sets_per_week_range == (12, 20)

    def test_sets_per_week_range_falls_back_without_numbers(self):
        """Text with no numeric content gives the fixed 12-18 default."""
        assert make_landmarks(mav="varies by individual").sets_per_week_range == (12, 18)

    def test_exercise_count_is_range_midpoint(self):
        assert make_landmarks(exercises_per_session="3-4 exercises").exercise_count == 3
        assert make_landmarks(exercises_per_session="2-6 exercises").exercise_count == 4

    def test_exercise_count_falls_back_to_three(self):
        assert make_landmarks(exercises_per_session="a few").exercise_count == 3


# ---------------------------------------------------------------------------
# Exercise classification
# ---------------------------------------------------------------------------

class TestEffectiveness:
    """Tests for the 1-4 effectiveness scale."""

    @pytest.mark.parametrize("text,score", [
        ("Very High", 4),
        ("very high for beginners", 4),
        ("High", 3),
        ("Medium-High", 3),
        ("Medium", 2),
        ("Low", 1),
        ("", 1),
    ])
    def test_rating(self, text, score):
        assert effectiveness_rating(text) == score

    def test_scores_per_axis(self):
        effectiveness = Effectiveness(hypertrophy="Very High", strength="Medium", power="Low")
        assert effectiveness.hypertrophy_score == 4
        assert effectiveness.strength_score == 2
        assert effectiveness.power_score == 1


class TestExerciseDetail:
    """Tests for compound detection and safety classification."""

    @pytest.mark.parametrize("name", [
        "Back Squat", "Overhead Press", "Romanian Deadlift", "Barbell Row",
        "Weighted Pull-up", "Chin-up", "Weighted Dip", "Walking Lunge", "Power Clean",
    ])
    def test_compound_names(self, name):
        assert make_exercise(name=name).is_compound

    @pytest.mark.parametrize("name", ["Cable Fly", "Leg Extension", "Face Pull", "Lat Pulldown"])
    def test_isolation_names(self, name):
        assert not make_exercise(name=name).is_compound

    @pytest.mark.parametrize("risk,level", [
        ("Very Low", SafetyLevel.LOW),
        ("Low", SafetyLevel.LOW),
        ("Low/Medium", SafetyLevel.MEDIUM),
        ("Medium", SafetyLevel.MEDIUM),
        ("High", SafetyLevel.HIGH),
        ("Low if form is good", SafetyLevel.HIGH),
    ])
    def test_safety_level(self, risk, level):
        assert make_exercise(injury_risk=risk).safety_level == level

    def test_identity_is_name(self):
        assert make_exercise().id == "Barbell Bench Press"

    def test_substitution_identity_is_scenario(self):
        sub = ExerciseSubstitution(scenario="No bench", substitute="Floor Press", notes="")
        assert sub.id == "No bench"

    def test_all_exercises_lists_compound_first(self):
        group = MuscleGroupExercises(
            top_compound_exercises=(make_exercise("Bench Press"),),
            top_accessory_exercises=(make_exercise("Cable Fly"),),
        )
        assert [e.name for e in group.all_exercises] == ["Bench Press", "Cable Fly"]


# ---------------------------------------------------------------------------
# Schema parsing
# ---------------------------------------------------------------------------

class TestParseTrainingKnowledge:
    """Tests for schema-aware deserialization."""

    def test_parses_bundled_dataset(self, document):
        knowledge = parse_training_knowledge(document)

        assert set(knowledge.muscle_groups) == {"chest", "back", "shoulders", "quads"}
        assert knowledge.general_principles is not None
        assert "chest" in knowledge.volume_guidelines

    def test_maps_renamed_fields(self, document):
        knowledge = parse_training_knowledge(document)
        bench = knowledge.muscle_groups["chest"].top_compound_exercises[0]

        assert bench.name == "Barbell Bench Press"
        assert bench.emg_activation.startswith("High pectoralis major")
        assert bench.progression_path.startswith("Push-up")

    def test_maps_uppercase_landmark_keys(self, document):
        knowledge = parse_training_knowledge(document)
        landmarks = (
            knowledge.volume_guidelines["chest"]
            .for_goal(Goal.BULK)
            .for_level(FitnessLevel.INTERMEDIATE)
        )
        assert landmarks.mav == "12-20 sets/week"
        assert landmarks.sets_per_week_range == (12, 20)
        assert isinstance(landmarks.sources, tuple)

    def test_optional_field_defaults_to_none(self, document):
        knowledge = parse_training_knowledge(document)
        incline = knowledge.muscle_groups["chest"].top_compound_exercises[1]
        assert incline.when_to_prioritize is None

    def test_missing_key_reports_path(self, document):
        del document["exercise_selection"]["chest"]["top_compound_exercises"][0]["EMG_activation"]

        with pytest.raises(KnowledgeSchemaError) as exc_info:
            parse_training_knowledge(document)

        assert exc_info.value.path == (
            "$.exercise_selection.chest.top_compound_exercises[0].EMG_activation"
        )

    def test_wrong_type_is_rejected(self, document):
        document["volume_guidelines"]["back"]["cut"]["beginner"]["sources"] = "one source"

        with pytest.raises(KnowledgeSchemaError, match="expected array"):
            parse_training_knowledge(document)

    def test_missing_goal_is_rejected(self, document):
        del document["volume_guidelines"]["quads"]["maintain"]

        with pytest.raises(KnowledgeSchemaError, match="missing required key"):
            parse_training_knowledge(document)

    def test_missing_muscle_group_is_rejected(self, document):
        broken = copy.deepcopy(document)
        del broken["exercise_selection"]["shoulders"]

        with pytest.raises(KnowledgeSchemaError):
            parse_training_knowledge(broken)

    def test_non_object_root_is_rejected(self):
        with pytest.raises(KnowledgeSchemaError, match="expected object"):
            parse_training_knowledge(["not", "a", "document"])
