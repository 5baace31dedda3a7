"""
ProgressStore - Hold and persist one learner's training progress.

The whole ProgressRecord lives in memory and is re-serialized to storage
after every mutation:
- Journey start and safety acknowledgment
- Module attempts, completion and time spent
- Quiz scores
- Certificate eligibility and the earned-certificate latch

Loading never fails: a missing, corrupt or ill-shaped stored record is
replaced by a fresh default record. Saving never fails either: storage
errors are logged and the in-memory record stays authoritative for the
rest of the session.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from pydantic import ValidationError

from cpattrainer.config import load_settings
from cpattrainer.schemas import (
    Curriculum,
    ModuleProgress,
    ProgressRecord,
    SafetyAcknowledgment,
)

from .gating import compute_certificate_eligibility
from .storage import STORAGE_ERRORS, SqliteStorage, Storage

logger = logging.getLogger(__name__)

STORAGE_KEY = "cpat_training_progress"
SAFETY_CONTENT_VERSION = "2024.1.0"
DEFAULT_USER_AGENT = "cpattrainer"

# Keys a stored record must carry to be considered a progress record at all.
REQUIRED_KEYS = ("completedModules",)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_record(raw: Optional[str]) -> Optional[ProgressRecord]:
    """
    Parse a stored progress blob.

    Returns None when the blob is missing, not JSON, not a JSON object,
    lacks a required key or fails schema validation. Unknown keys are
    ignored and missing optional keys take their defaults.
    """
    if raw is None:
        return None

    try:
        payload = json.loads(raw)
    except (json.JSONDecodeError, TypeError) as e:
        logger.warning(f"Stored progress is not valid JSON: {e}")
        return None

    if not isinstance(payload, dict):
        logger.warning(f"Stored progress is a {type(payload).__name__}, expected an object")
        return None

    missing = [key for key in REQUIRED_KEYS if key not in payload]
    if missing:
        logger.warning(f"Stored progress is missing required keys: {missing}")
        return None

    try:
        return ProgressRecord.model_validate(payload)
    except ValidationError as e:
        logger.warning(f"Stored progress failed validation ({e.error_count()} errors)")
        return None


class ProgressStore:
    """
    Own the learner's progress record and its persisted copy.

    The store does not check prerequisites: callers ask the gating
    functions (or the Navigator) before starting or completing a module.
    """

    def __init__(
        self,
        curriculum: Curriculum,
        storage: Optional[Storage] = None,
        clock: Optional[Callable[[], datetime]] = None,
        user_agent: Optional[str] = None,
    ):
        """
        Initialize the store and load any persisted record.

        Args:
            curriculum: Curriculum used to derive certificate eligibility
            storage: Storage backend (default: SqliteStorage at the configured path)
            clock: Returns the current time (default: aware UTC now)
            user_agent: Client metadata stored with the safety acknowledgment
        """
        if storage is None:
            storage = SqliteStorage(load_settings().progress_db)

        self.curriculum = curriculum
        self.storage = storage
        self.clock = clock or _utc_now
        self.user_agent = user_agent or DEFAULT_USER_AGENT
        self._record = self._load()

    # -------------------------------------------------------------------------
    # Loading and saving
    # -------------------------------------------------------------------------

    def _load(self) -> ProgressRecord:
        """Read the persisted record, falling back to a default one."""
        try:
            raw = self.storage.get_item(STORAGE_KEY)
        except STORAGE_ERRORS as e:
            logger.warning(f"Could not read stored progress: {e}")
            raw = None

        record = parse_record(raw)
        if record is None:
            if raw is not None:
                logger.warning("Discarding unreadable stored progress, starting fresh")
            return ProgressRecord()

        return self._normalize(record)

    def _normalize(self, record: ProgressRecord) -> ProgressRecord:
        """Restore invariants a hand-edited or older record may break."""
        record.completed_modules = list(dict.fromkeys(record.completed_modules))
        if record.current_module in record.completed_modules:
            record.current_module = None
        record.certificate_eligible = compute_certificate_eligibility(
            record, self.curriculum.module_ids
        )
        return record

    def _save(self):
        """Write the whole record. Failures are logged, never raised."""
        self._record.last_accessed = self.clock()
        try:
            self.storage.set_item(STORAGE_KEY, self._record.to_json())
        except STORAGE_ERRORS as e:
            logger.warning(f"Failed to save progress: {e}")

    def reload(self):
        """Re-read the persisted record, replacing in-memory state."""
        self._record = self._load()

    @property
    def record(self) -> ProgressRecord:
        """Snapshot of the current record. Changing it does not affect the store."""
        return self._record.model_copy(deep=True)

    # -------------------------------------------------------------------------
    # Journey and safety
    # -------------------------------------------------------------------------

    def start_journey(self):
        self._record.journey_started = True
        self._save()

    def acknowledge_safety(self):
        """Record (or refresh) the safety acknowledgment."""
        self._record.safety_acknowledged = SafetyAcknowledgment(
            acknowledged=True,
            timestamp=self.clock(),
            version=SAFETY_CONTENT_VERSION,
            user_agent=self.user_agent,
        )
        logger.debug("Safety acknowledged")
        self._save()

    # -------------------------------------------------------------------------
    # Modules
    # -------------------------------------------------------------------------

    def _module_progress(self, module_id: str) -> ModuleProgress:
        """Get the progress entry for a module, creating it if absent."""
        if module_id not in self._record.module_progress:
            self._record.module_progress[module_id] = ModuleProgress()
        return self._record.module_progress[module_id]

    def start_module(self, module_id: str):
        """
        Begin a new attempt at a module.

        Resets the attempt's completion and time and bumps the attempt
        counter. A module that is already completed is not made current
        again; its attempt is still counted.
        """
        progress = self._module_progress(module_id)
        progress.completed = False
        progress.completed_at = None
        progress.time_spent_ms = 0
        progress.attempts += 1

        if module_id not in self._record.completed_modules:
            self._record.current_module = module_id
        logger.debug(f"Started {module_id} (attempt {progress.attempts})")
        self._save()

    def complete_module(self, module_id: str, score: Optional[int] = None):
        """
        Mark a module completed.

        Args:
            module_id: Module to complete
            score: Optional quiz score, an integer percentage 0..100
        """
        if score is not None and not 0 <= score <= 100:
            raise ValueError(f"Score must be between 0 and 100, got {score}")

        if module_id not in self._record.completed_modules:
            self._record.completed_modules.append(module_id)
        if self._record.current_module == module_id:
            self._record.current_module = None

        progress = self._module_progress(module_id)
        progress.completed = True
        progress.completed_at = self.clock()
        if score is not None:
            progress.score = score
            self._record.quiz_scores[module_id] = score

        self._record.certificate_eligible = compute_certificate_eligibility(
            self._record, self.curriculum.module_ids
        )
        logger.debug(f"Completed {module_id} (score={score})")
        self._save()

    def update_module_time(self, module_id: str, delta_ms: int):
        """Add elapsed milliseconds to a module's time spent."""
        if delta_ms < 0:
            raise ValueError(f"Time delta must be non-negative, got {delta_ms}")

        progress = self._module_progress(module_id)
        progress.time_spent_ms += delta_ms
        self._save()

    # -------------------------------------------------------------------------
    # Certificate
    # -------------------------------------------------------------------------

    def earn_certificate(self) -> bool:
        """
        Latch the certificate as earned.

        Returns True if this call set the latch, False if it was already set.
        The certificate date never changes once set.
        """
        if self._record.certificate_earned:
            return False

        self._record.certificate_earned = True
        self._record.certificate_date = self.clock()
        logger.info("Certificate earned")
        self._save()
        return True

    # -------------------------------------------------------------------------
    # Reset
    # -------------------------------------------------------------------------

    def reset_progress(self):
        """Discard all progress and remove the persisted copy."""
        self._record = ProgressRecord()
        try:
            self.storage.remove_item(STORAGE_KEY)
        except STORAGE_ERRORS as e:
            logger.warning(f"Failed to remove stored progress: {e}")
        logger.info("Progress reset")
