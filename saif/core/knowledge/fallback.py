"""
Static training guidance used when the knowledge dataset can't be loaded.

These blocks are deliberately short and general. They are what the coach
falls back on, not a replacement for the structured dataset.
"""

WORKOUT_SPLIT_PRINCIPLES = """WORKOUT SPLIT PRINCIPLES:
- PPL (Push / Pull / Legs) is effective for most goals (bulk/cut/maintain).
- Alternate antagonist groups to maximize recovery: push -> pull -> legs -> rest -> repeat.
- Match frequency to user availability (2-7 days/week) and experience."""

EXERCISE_SELECTION_RULES = """EXERCISE SELECTION:
COMPOUND PRIORITY (highest stimulus/economy):
- Push: Barbell Bench, Incline DB Press, Overhead Press, Dips
- Pull: Barbell Row, Weighted Pull-ups/Lat Pulldown, Chest Supported Row
- Legs: Back Squat, Front Squat, Romanian Deadlift, Leg Press
ACCESSORY:
- Push: Lateral Raises, Triceps Extensions
- Pull: Face Pulls, Biceps Curls
- Legs: Lunges, Leg Curls, Calf Raises"""

PROGRESSIVE_OVERLOAD_RULES = """PROGRESSIVE OVERLOAD:
- When all sets are completed with RPE <= 8 and good form, increase load 2.5-5% next time.
- If failing early or RPE >= 9.5, reduce load 5-10% or cut one set.
- Favor small weekly increases for beginners; autoregulate for advanced lifters."""

RECOVERY_GUIDELINES = """RECOVERY WINDOWS (typical):
- Chest/Back/Shoulders/Arms: 48-72 hours
- Legs/Glutes: 72-96 hours
- Adjust by soreness, sleep quality, and performance trends."""

FALLBACK_SECTIONS = {
    "workout_split_principles": WORKOUT_SPLIT_PRINCIPLES,
    "exercise_selection_rules": EXERCISE_SELECTION_RULES,
    "progressive_overload_rules": PROGRESSIVE_OVERLOAD_RULES,
    "recovery_guidelines": RECOVERY_GUIDELINES,
}


def fallback_text() -> str:
    """All fallback sections as one prompt-ready block."""
    return "\n\n".join(FALLBACK_SECTIONS.values())
