"""
Unit tests for the training knowledge lookup service.

Most tests run against the real bundled dataset through the real loader.
Fallback behavior is exercised with loaders that fail the way a broken
deployment would: missing file, invalid JSON, wrong schema.
"""

import json
import threading
import time

import pytest

from saif.core.knowledge.models import ExerciseType, FitnessLevel, Goal, GymType
from saif.core.knowledge.recovery import RecoveryKnowledgeService
from saif.core.knowledge.service import KnowledgeLoadError, TrainingKnowledgeService
from saif.infrastructure.knowledge.loader import BUNDLED_DATASET, BundledKnowledgeLoader


@pytest.fixture
def service():
    knowledge = TrainingKnowledgeService(loader=BundledKnowledgeLoader())
    knowledge.initialize()
    return knowledge


@pytest.fixture
def fallback_service():
    def failing_loader():
        raise KnowledgeLoadError("dataset missing")

    return TrainingKnowledgeService(loader=failing_loader)


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

class TestLoading:
    """Tests for load-once and fallback switching."""

    def test_bundled_dataset_loads_without_fallback(self, service):
        assert service.is_loaded
        assert not service.is_using_fallback
        assert service.find_exercise("Barbell Bench Press") is not None

    def test_first_access_triggers_load(self):
        knowledge = TrainingKnowledgeService(loader=BundledKnowledgeLoader())
        assert not knowledge.is_loaded

        knowledge.find_exercise("Back Squat")

        assert knowledge.is_loaded

    def test_missing_file_switches_to_fallback(self, tmp_path):
        knowledge = TrainingKnowledgeService(
            loader=BundledKnowledgeLoader(tmp_path / "missing.json")
        )
        assert knowledge.is_using_fallback
        assert knowledge.fallback_text().strip()

    def test_invalid_json_switches_to_fallback(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text('{"schema_version": "1", ', encoding="utf-8")

        knowledge = TrainingKnowledgeService(loader=BundledKnowledgeLoader(path))

        assert knowledge.is_using_fallback
        assert knowledge.fallback_text().strip()

    def test_invalid_utf8_switches_to_fallback(self, tmp_path):
        """Bytes that don't decode are a corrupt dataset, not a crash."""
        path = tmp_path / "binary.json"
        path.write_bytes(b'{"schema_version": "\xff\xfe"}')

        knowledge = TrainingKnowledgeService(loader=BundledKnowledgeLoader(path))

        assert knowledge.is_using_fallback
        assert knowledge.find_exercise("Back Squat") is None

    def test_invalid_utf8_is_a_load_error(self, tmp_path):
        path = tmp_path / "binary.json"
        path.write_bytes(b"\xff\xfe\x00")

        with pytest.raises(KnowledgeLoadError, match="UTF-8"):
            BundledKnowledgeLoader(path)()

    def test_schema_mismatch_switches_to_fallback(self, tmp_path):
        with open(BUNDLED_DATASET, "r", encoding="utf-8") as f:
            document = json.load(f)
        del document["exercise_selection"]["back"]["top_compound_exercises"][0]["effectiveness"]

        path = tmp_path / "mismatch.json"
        path.write_text(json.dumps(document), encoding="utf-8")

        knowledge = TrainingKnowledgeService(loader=BundledKnowledgeLoader(path))

        assert knowledge.is_using_fallback

    def test_loader_is_called_once(self):
        calls = []

        def counting_loader():
            calls.append(1)
            with open(BUNDLED_DATASET, "r", encoding="utf-8") as f:
                return json.load(f)

        knowledge = TrainingKnowledgeService(loader=counting_loader)
        knowledge.initialize()
        knowledge.initialize()
        knowledge.find_exercise("Back Squat")

        assert len(calls) == 1

    def test_concurrent_first_access_loads_once(self):
        """Readers racing the load all wait and see the same loaded state."""
        calls = []

        def slow_loader():
            calls.append(1)
            time.sleep(0.05)
            with open(BUNDLED_DATASET, "r", encoding="utf-8") as f:
                return json.load(f)

        knowledge = TrainingKnowledgeService(loader=slow_loader)
        results = []
        lock = threading.Lock()

        def reader():
            found = knowledge.find_exercise("Barbell Bench Press")
            with lock:
                results.append((knowledge.is_using_fallback, found is not None))

        threads = [threading.Thread(target=reader) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(calls) == 1
        assert results == [(False, True)] * 8


class TestFallbackMode:
    """Lookups degrade to absence instead of raising."""

    def test_lookups_return_nothing(self, fallback_service):
        assert fallback_service.find_exercise("Barbell Bench Press") is None
        assert fallback_service.get_exercises("chest") == []
        assert fallback_service.get_substitutions("chest") == []
        assert fallback_service.get_ordering_principles() is None
        assert fallback_service.get_general_principles() is None
        assert fallback_service.muscle_groups() == []
        assert fallback_service.schema_version is None
        assert fallback_service.get_volume_landmarks(
            "chest", Goal.BULK, FitnessLevel.BEGINNER
        ) is None

    def test_fallback_text_covers_every_section(self, fallback_service):
        text = fallback_service.fallback_text()

        assert "WORKOUT SPLIT PRINCIPLES" in text
        assert "EXERCISE SELECTION" in text
        assert "PROGRESSIVE OVERLOAD" in text
        assert "RECOVERY WINDOWS" in text


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------

class TestFindExercise:
    """Tests for name lookup."""

    def test_exact_name(self, service):
        exercise = service.find_exercise("Barbell Bench Press")
        assert exercise.name == "Barbell Bench Press"

    def test_ignores_case_and_spacing(self, service):
        exercise = service.find_exercise("  barbell   BENCH press ")
        assert exercise is not None
        assert exercise.name == "Barbell Bench Press"

    def test_finds_accessory_exercises(self, service):
        assert service.find_exercise("Face Pull") is not None

    def test_no_partial_matching(self, service):
        assert service.find_exercise("Bench") is None
        assert service.find_exercise("Bench Press") is None

    def test_unknown_exercise(self, service):
        assert service.find_exercise("Underwater Basket Weaving") is None

    def test_empty_name(self, service):
        assert service.find_exercise("   ") is None


class TestGetExercises:
    """Tests for per-muscle-group exercise lists."""

    def test_all_is_compound_then_accessory(self, service):
        compound = service.get_exercises("chest", ExerciseType.COMPOUND)
        accessory = service.get_exercises("chest", ExerciseType.ACCESSORY)
        everything = service.get_exercises("chest")

        assert everything == compound + accessory
        assert "Cable Fly" in [e.name for e in accessory]

    @pytest.mark.parametrize("alias,group", [
        ("pecs", "chest"),
        ("Pectorals", "chest"),
        ("lats", "back"),
        ("delts", "shoulders"),
        ("legs", "quads"),
        ("QUADRICEPS", "quads"),
    ])
    def test_aliases_resolve_to_group(self, service, alias, group):
        assert service.get_exercises(alias) == service.get_exercises(group)

    def test_unknown_group_is_empty(self, service):
        assert service.get_exercises("forearms") == []

    def test_ranked_for_bulk_puts_very_high_hypertrophy_first(self, service):
        ranked = service.get_exercises_ranked("chest", Goal.BULK)
        scores = [service.effectiveness_score(e, Goal.BULK) for e in ranked]

        assert scores == sorted(scores, reverse=True)
        assert ranked[0].name == "Barbell Bench Press"

    def test_gym_filter_minimal_keeps_bodyweight_only(self, service):
        names = [e.name for e in service.get_exercises_for_gym("chest", GymType.MINIMAL)]
        assert names == ["Incline Dumbbell Press", "Push-up"]

    def test_gym_filter_commercial_keeps_everything(self, service):
        assert service.get_exercises_for_gym("back", GymType.COMMERCIAL) == service.get_exercises("back")

    def test_substitutions(self, service):
        scenarios = [s.scenario for s in service.get_substitutions("quads")]
        assert "Knee discomfort when squatting" in scenarios


class TestScoring:
    """Tests for goal scoring and equipment rules."""

    def test_effectiveness_score_per_goal(self, service):
        squat = service.find_exercise("Back Squat")  # hypertrophy 4, strength 4, power 3

        assert service.effectiveness_score(squat, Goal.BULK) == 4
        assert service.effectiveness_score(squat, Goal.CUT) == (4 * 2 + 3) // 3
        assert service.effectiveness_score(squat, Goal.MAINTAIN) == 4

    def test_home_gym_rejects_machines(self, service):
        leg_extension = service.find_exercise("Leg Extension")
        assert not service.is_equipment_available(leg_extension, GymType.HOME)

    def test_minimal_gym_rejects_cable_even_with_band(self, service):
        face_pull = service.find_exercise("Face Pull")  # "Cable machine or band"

        assert service.is_equipment_available(face_pull, GymType.HOME)
        assert not service.is_equipment_available(face_pull, GymType.MINIMAL)


class TestVolumeAndPrinciples:
    """Tests for volume landmarks and principles."""

    def test_volume_landmarks(self, service):
        landmarks = service.get_volume_landmarks("back", Goal.BULK, FitnessLevel.ADVANCED)
        assert landmarks.sets_per_week_range == (18, 25)

    def test_volume_landmarks_accept_aliases(self, service):
        assert service.get_volume_landmarks("lats", Goal.CUT, FitnessLevel.BEGINNER) is not None

    def test_unknown_volume_group(self, service):
        assert service.get_volume_landmarks("calves", Goal.BULK, FitnessLevel.BEGINNER) is None

    def test_principles(self, service):
        assert service.get_ordering_principles().optimal_sequence
        assert service.get_general_principles().deload_frequency
        assert service.schema_version == "2024.2"


class TestRecoveryKnowledge:
    """Tests for the rest-day heuristics."""

    @pytest.mark.parametrize("raw,group", [
        ("Legs", "legs"),
        ("quadriceps", "quads"),
        ("Hamstrings", "hamstrings"),
        ("glutes", "glutes"),
        ("Upper Back", "back"),
        ("chest", "chest"),
        ("side delts", "shoulders"),
        ("calf", "calves"),
        ("forearms", "forearms"),
    ])
    def test_normalize(self, raw, group):
        assert RecoveryKnowledgeService().normalize(raw) == group

    def test_rest_days(self):
        recovery = RecoveryKnowledgeService()
        assert recovery.recommended_rest_days("calf raises") == 1
        assert recovery.recommended_rest_days("chest") == 2
        assert recovery.recommended_rest_days("forearms") == 2
