"""
Runtime configuration for CPAT Trainer.

Settings come from environment variables, optionally loaded from a .env file
in the working directory:

    CPAT_DATA_DIR         directory for local learner data (~/.cpattrainer)
    CPAT_PROGRESS_DB      progress database path (<data dir>/progress.db)
    CPAT_CURRICULUM_PATH  curriculum YAML (bundled modules.yaml)
    CPAT_LOG_LEVEL        logging level name (INFO)
    CPAT_USER_AGENT       client metadata stored with the safety acknowledgment
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from cpattrainer import __version__

DEFAULT_DATA_DIR = Path.home() / ".cpattrainer"
LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


@dataclass
class Settings:
    data_dir: Path
    progress_db: Path
    curriculum_path: Optional[Path]  # None means the bundled curriculum
    log_level: str
    user_agent: str


def load_settings(env_file: Optional[Path] = None) -> Settings:
    """
    Build settings from the environment.

    Args:
        env_file: Optional .env file to load (default: search from cwd).
            Variables already set in the environment win.
    """
    load_dotenv(env_file)

    data_dir = Path(os.environ.get("CPAT_DATA_DIR", str(DEFAULT_DATA_DIR))).expanduser()
    progress_db = os.environ.get("CPAT_PROGRESS_DB")
    curriculum_path = os.environ.get("CPAT_CURRICULUM_PATH")

    return Settings(
        data_dir=data_dir,
        progress_db=Path(progress_db).expanduser() if progress_db else data_dir / "progress.db",
        curriculum_path=Path(curriculum_path).expanduser() if curriculum_path else None,
        log_level=os.environ.get("CPAT_LOG_LEVEL", "INFO").upper(),
        user_agent=os.environ.get("CPAT_USER_AGENT", f"cpattrainer/{__version__}"),
    )


def configure_logging(level: str = "INFO"):
    """Set up root logging for scripts and the app."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )
