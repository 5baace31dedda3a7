#!/usr/bin/env python3
"""
check_curriculum.py - Validate a curriculum YAML file.

Checks module ids, positions and prerequisites (including cycle detection)
and prints a short report of the module order and estimated duration.

Usage:
  python scripts/check_curriculum.py
  python scripts/check_curriculum.py --curriculum path/to/modules.yaml
"""

import argparse
import logging
import sys
from pathlib import Path

# Project root for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from cpattrainer.classroom import (
    DEFAULT_CURRICULUM_PATH,
    CurriculumError,
    estimate_total_duration,
    load_curriculum,
)
from cpattrainer.config import configure_logging

logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(
        description="Validate a curriculum YAML file.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python scripts/check_curriculum.py
  python scripts/check_curriculum.py --curriculum data/modules.yaml
        """,
    )
    parser.add_argument(
        "--curriculum",
        type=Path,
        default=DEFAULT_CURRICULUM_PATH,
        help="Curriculum YAML file (default: bundled modules.yaml)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args()
    configure_logging("DEBUG" if args.verbose else "INFO")

    try:
        curriculum = load_curriculum(args.curriculum)
    except FileNotFoundError as e:
        print(f"ERROR: {e}")
        sys.exit(1)
    except CurriculumError as e:
        print(f"Curriculum {args.curriculum} is invalid:")
        for error in e.errors:
            print(f"  - {error}")
        sys.exit(1)

    print(f"Curriculum {args.curriculum} is valid.")
    print(f"  - Modules: {len(curriculum)}")
    print(f"  - Estimated duration: {estimate_total_duration(curriculum)}")
    print()
    for module in curriculum.modules:
        quiz = "no assessment"
        if module.assessment:
            quiz = f"{len(module.assessment.questions)} questions, pass {module.assessment.passing_score}%"
        flags = ", ".join(module.safety_flags) or "none"
        print(f"  {module.position}. {module.id} ({module.duration}; {quiz}; flags: {flags})")


if __name__ == "__main__":
    main()
