"""
Injury-aware exercise screening.

A small rule table keyed by injury area. Each rule lists exercises to
avoid, exercises to use with caution and preferred substitutes. Matching
is by case-insensitive substring so "Barbell Row" catches "Pendlay
Barbell Row" too.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional

from ..knowledge.models import ExerciseDetail

logger = logging.getLogger(__name__)


class ExerciseSafetyStatus(Enum):
    SAFE = "safe"
    CAUTION = "caution"
    AVOID = "avoid"


@dataclass(frozen=True)
class InjuryRule:
    injury: str
    avoid_exercises: tuple[str, ...]
    caution_exercises: tuple[str, ...]
    preferred_substitutes: tuple[str, ...]
    modification_notes: str


@dataclass(frozen=True)
class FilteredExercise:
    """An exercise that passed screening, with a note when it needs care."""
    exercise: ExerciseDetail
    status: ExerciseSafetyStatus
    note: Optional[str] = None


INJURY_RULES = (
    InjuryRule(
        injury="shoulder",
        avoid_exercises=(
            "Barbell Overhead Press", "Behind-the-Neck Press", "Upright Rows",
            "Wide-Grip Bench Press", "Dips", "Muscle-Ups",
        ),
        caution_exercises=(
            "Barbell Bench Press", "Incline Dumbbell Press", "Lateral Raises", "Face Pulls",
        ),
        preferred_substitutes=(
            "Landmine Press", "Neutral-Grip Dumbbell Press", "Cable Lateral Raises",
            "Machine Shoulder Press",
        ),
        modification_notes="Use neutral grips, limit overhead pressing, emphasize scapular stability",
    ),
    InjuryRule(
        injury="lower_back",
        avoid_exercises=(
            "Conventional Deadlift", "Barbell Row", "Good Mornings", "Barbell Squats",
            "Weighted Hyperextensions",
        ),
        caution_exercises=("Romanian Deadlift", "Leg Press", "Front Squats"),
        preferred_substitutes=(
            "Chest-Supported Row", "Machine Row", "Trap Bar Deadlift", "Goblet Squat", "Leg Press",
        ),
        modification_notes="Limit spinal loading, prefer supported positions, maintain neutral spine",
    ),
    InjuryRule(
        injury="knee",
        avoid_exercises=(
            "Deep Squats", "Leg Press", "Walking Lunges", "Bulgarian Split Squats", "Box Jumps",
        ),
        caution_exercises=("Barbell Squats", "Leg Extensions", "Hack Squats"),
        preferred_substitutes=(
            "Leg Press", "Hip Thrusts", "Glute Bridges", "Romanian Deadlift", "Hamstring Curls",
        ),
        modification_notes="Limit knee flexion under load, prefer hip-dominant movements, control ROM",
    ),
    InjuryRule(
        injury="elbow",
        avoid_exercises=(
            "Heavy Barbell Curls", "Skull Crushers", "Close-Grip Bench Press",
            "Overhead Tricep Extensions",
        ),
        caution_exercises=("Dumbbell Curls", "Tricep Dips", "Chin-Ups"),
        preferred_substitutes=(
            "Hammer Curls", "Cable Curls", "Cable Tricep Pushdowns", "Machine Curls",
        ),
        modification_notes="Use lighter weights, avoid full lockout, prefer cables and machines",
    ),
    InjuryRule(
        injury="wrist",
        avoid_exercises=(
            "Barbell Bench Press", "Barbell Overhead Press", "Barbell Curls", "Push-Ups",
            "Front Squats",
        ),
        caution_exercises=("Dumbbell Press", "Dumbbell Curls"),
        preferred_substitutes=(
            "Machine Press", "Cable Exercises", "Neutral-Grip Exercises", "Goblet Squat",
            "Safety Bar Squats",
        ),
        modification_notes="Use neutral grips, prefer machines/cables, consider wrist wraps",
    ),
)

# Free-text keywords per injury area, in rule order.
INJURY_KEYWORDS = (
    ("shoulder", ("shoulder", "rotator")),
    ("lower_back", ("back", "spine", "disc")),
    ("knee", ("knee", "acl", "mcl", "meniscus")),
    ("elbow", ("elbow", "golfer")),
    ("wrist", ("wrist", "carpal")),
)


def _contains_any(name: str, candidates: Iterable[str]) -> bool:
    return any(candidate.lower() in name for candidate in candidates)


class InjuryRuleEngine:
    """Screens exercises against a user's reported injuries."""

    def __init__(self, rules: Iterable[InjuryRule] = INJURY_RULES) -> None:
        self._rules = {rule.injury: rule for rule in rules}

    def parse_injuries(self, text: Optional[str]) -> list[str]:
        """
        Pull injury areas out of free text like "left knee (ACL), tennis elbow".

        Each area appears once, in rule order.
        """
        if not text or not text.strip():
            return []
        lowered = text.lower()
        return [
            injury for injury, keywords in INJURY_KEYWORDS
            if any(keyword in lowered for keyword in keywords)
        ]

    def filter_exercises(
        self,
        exercises: Iterable[ExerciseDetail],
        injuries: list[str],
    ) -> list[FilteredExercise]:
        """
        Drop exercises to avoid and flag the ones that need caution.

        An avoid match on any injury wins over caution matches on others.
        Input order is kept.
        """
        filtered = []
        for exercise in exercises:
            name = exercise.name.lower()
            status = ExerciseSafetyStatus.SAFE
            note = None

            for injury in injuries:
                rule = self._rules.get(injury)
                if rule is None:
                    continue
                if _contains_any(name, rule.avoid_exercises):
                    status = ExerciseSafetyStatus.AVOID
                    note = f"Not recommended with {injury.replace('_', ' ')} issues"
                    break
                if _contains_any(name, rule.caution_exercises):
                    status = ExerciseSafetyStatus.CAUTION
                    note = f"Use with caution: {rule.modification_notes}"

            if status == ExerciseSafetyStatus.AVOID:
                logger.debug(
                    "Excluded exercise for injury",
                    extra={"exercise": exercise.name, "injuries": injuries}
                )
                continue
            filtered.append(FilteredExercise(exercise=exercise, status=status, note=note))
        return filtered

    def safe_substitutes(self, injuries: list[str]) -> list[str]:
        substitutes: list[str] = []
        for injury in injuries:
            rule = self._rules.get(injury)
            if rule is None:
                continue
            for name in rule.preferred_substitutes:
                if name not in substitutes:
                    substitutes.append(name)
        return substitutes

    def modification_notes(self, injuries: list[str]) -> list[str]:
        return [self._rules[i].modification_notes for i in injuries if i in self._rules]
