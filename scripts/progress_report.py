#!/usr/bin/env python3
"""
progress_report.py - Print the learner progress stored on this machine.

Usage:
  python scripts/progress_report.py
  python scripts/progress_report.py --db ~/.cpattrainer/progress.db
  python scripts/progress_report.py --reset
"""

import argparse
import sys
from pathlib import Path

# Project root for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from cpattrainer.classroom import Navigator, ProgressStore, SqliteStorage, load_curriculum
from cpattrainer.config import configure_logging, load_settings


def main():
    settings = load_settings()

    parser = argparse.ArgumentParser(description="Print stored learner progress.")
    parser.add_argument(
        "--db",
        type=Path,
        default=settings.progress_db,
        help=f"Progress database (default: {settings.progress_db})",
    )
    parser.add_argument(
        "--curriculum",
        type=Path,
        default=settings.curriculum_path,
        help="Curriculum YAML file (default: bundled modules.yaml)",
    )
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Discard all stored progress",
    )

    args = parser.parse_args()
    configure_logging(settings.log_level)

    curriculum = load_curriculum(args.curriculum)
    store = ProgressStore(curriculum, storage=SqliteStorage(args.db))

    if args.reset:
        store.reset_progress()
        print(f"Progress in {args.db} reset.")
        return

    nav = Navigator(curriculum, store)
    stats = nav.get_progress_summary()

    print(f"Progress in {args.db}")
    print(f"  - Safety acknowledged: {'yes' if stats['safety_acknowledged'] else 'no'}")
    print(f"  - Completed: {stats['completed']}/{stats['total_modules']} ({stats['completion_percent']}%)")
    print(f"  - Time spent: {stats['total_time_spent']}")
    print(f"  - Next module: {stats['next_module_id'] or 'none'}")
    print()
    for entry in nav.get_journey():
        score = f" {entry.quiz_score}%" if entry.quiz_score is not None else ""
        print(f"  [{entry.status.value:>9}] {entry.module.id}{score}")

    summary = nav.get_certificate_summary()
    if summary:
        print()
        print(f"Certificate earned {summary.earned_at:%Y-%m-%d}, average score {summary.average_score}%")
    elif stats["certificate_eligible"]:
        print()
        print("Certificate eligible but not yet claimed.")


if __name__ == "__main__":
    main()
