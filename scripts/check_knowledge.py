#!/usr/bin/env python3
"""
Validate a training knowledge JSON file before shipping it.

Parses the file with the same schema the service uses and prints what it
found per muscle group. Exits non-zero if the file would put the service
into fallback mode.

Usage:
    python scripts/check_knowledge.py
    python scripts/check_knowledge.py --file path/to/training_knowledge.json

Reads KNOWLEDGE_DATA_PATH from .env when --file is not given.
"""

import os
import sys
from pathlib import Path

# Add project root to path so we can import our modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

from saif.core.knowledge.models import FitnessLevel, Goal
from saif.core.knowledge.schema import KnowledgeSchemaError, parse_training_knowledge
from saif.core.knowledge.service import KnowledgeLoadError
from saif.core.sanitizer import sanitize
from saif.infrastructure.knowledge.loader import BundledKnowledgeLoader

# Load environment variables
load_dotenv()


def check_knowledge_file(path: Path | None) -> bool:
    loader = BundledKnowledgeLoader(path)
    print(f"Checking knowledge from: {loader.path}")

    try:
        knowledge = parse_training_knowledge(loader())
    except KnowledgeLoadError as e:
        print(f"ERROR: {e}")
        return False
    except KnowledgeSchemaError as e:
        print(f"ERROR: schema mismatch at {e.path}: {e}")
        return False

    print(f"Schema version: {knowledge.schema_version}")

    print("\nExercises by muscle group:")
    for name, group in sorted(knowledge.muscle_groups.items()):
        print(
            f"  {name}: {len(group.top_compound_exercises)} compound, "
            f"{len(group.top_accessory_exercises)} accessory, "
            f"{len(group.exercise_substitutions)} substitutions"
        )

    print("\nWeekly set targets (intermediate):")
    for name, volume in sorted(knowledge.volume_guidelines.items()):
        targets = [
            f"{goal.value} {volume.for_goal(goal).for_level(FitnessLevel.INTERMEDIATE).sets_per_week_range}"
            for goal in Goal
        ]
        print(f"  {name}: {', '.join(targets)}")

    # Research text that only cleans up to nothing is almost certainly an export bug
    empty = [
        exercise.name for exercise in knowledge.iter_exercises()
        if not sanitize(exercise.emg_activation)
    ]
    if empty:
        print(f"\nWARNING: empty EMG text after sanitizing: {', '.join(empty)}")

    print("\n=== Knowledge file OK ===")
    return True


def main():
    import argparse

    parser = argparse.ArgumentParser(description='Validate a training knowledge JSON file')
    parser.add_argument('--file', default=os.getenv('KNOWLEDGE_DATA_PATH'), help='Knowledge file path (defaults to the bundled dataset)')
    args = parser.parse_args()

    path = Path(args.file) if args.file else None
    success = check_knowledge_file(path)

    sys.exit(0 if success else 1)


if __name__ == '__main__':
    main()
