"""
Navigator - Journey overview, gated module actions, and certificate claims.

Provides:
- Module statuses for the journey view
- Prerequisite checks before a module is started
- Assessment submission and completion
- Certificate claiming and the certificate summary
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from cpattrainer.schemas import Curriculum, Module, ModuleStatus
from cpattrainer.utils import format_elapsed, round_half_up

from . import gating
from .assessment import AssessmentResult, grade_assessment
from .progress import ProgressStore

logger = logging.getLogger(__name__)


@dataclass
class JourneyModule:
    """Module with journey metadata."""
    module: Module
    status: ModuleStatus
    missing_prerequisites: list[str]  # unmet prerequisite ids, safety gate included
    quiz_score: Optional[int]


@dataclass
class CertificateSummary:
    """Data printed on an earned certificate."""
    earned_at: datetime
    modules_completed: list[str]  # module titles in curriculum order
    total_time_spent: str  # "{h}h {m}m"
    average_score: int


class Navigator:
    """
    Navigate the curriculum with gate checking.

    Combines the Curriculum (content) with a ProgressStore (learner state).
    The store is owned by the caller, so several views can share one.
    """

    def __init__(self, curriculum: Curriculum, store: ProgressStore):
        """
        Initialize navigator.

        Args:
            curriculum: Static curriculum graph
            store: ProgressStore holding the learner's record
        """
        self.curriculum = curriculum
        self.store = store

    @property
    def total_modules(self) -> int:
        return len(self.curriculum)

    # -------------------------------------------------------------------------
    # Journey
    # -------------------------------------------------------------------------

    def get_module_status(self, module_id: str) -> ModuleStatus:
        return gating.compute_module_status(self.store.record, self.curriculum, module_id)

    def is_module_accessible(self, module_id: str) -> bool:
        return gating.is_module_accessible(self.store.record, self.curriculum, module_id)

    def get_journey(self) -> list[JourneyModule]:
        """All modules in order, each annotated with status and unmet prerequisites."""
        record = self.store.record
        return [
            JourneyModule(
                module=module,
                status=gating.compute_module_status(record, self.curriculum, module.id),
                missing_prerequisites=gating.get_missing_prerequisites(record, self.curriculum, module.id),
                quiz_score=record.quiz_scores.get(module.id),
            )
            for module in self.curriculum.modules
        ]

    def get_next_module_id(self) -> Optional[str]:
        return gating.get_next_module(self.store.record, self.curriculum.module_ids)

    def get_recommended_module_id(self) -> Optional[str]:
        """
        Get the module the learner should open next.

        Priority:
        1. Current module if one is in progress
        2. First incomplete module, if accessible
        """
        record = self.store.record
        if record.current_module and record.current_module in self.curriculum:
            return record.current_module

        next_id = gating.get_next_module(record, self.curriculum.module_ids)
        if next_id and gating.is_module_accessible(record, self.curriculum, next_id):
            return next_id
        return None

    # -------------------------------------------------------------------------
    # Module actions
    # -------------------------------------------------------------------------

    def start_module(self, module_id: str) -> bool:
        """
        Start a module if accessible.

        Returns True if the module was started, False if it is locked or unknown.
        """
        if not self.is_module_accessible(module_id):
            missing = gating.get_missing_prerequisites(self.store.record, self.curriculum, module_id)
            logger.info(f"Refused to start {module_id}; missing prerequisites: {missing or 'unknown module'}")
            return False

        self.store.start_module(module_id)
        return True

    def record_time(self, module_id: str, delta_ms: int):
        self.store.update_module_time(module_id, delta_ms)

    def can_complete(self, module_id: str) -> bool:
        """Accessible modules may be completed; completed ones may be retaken."""
        return (
            self.is_module_accessible(module_id)
            or module_id in self.store.record.completed_modules
        )

    def complete_module(self, module_id: str, score: Optional[int] = None) -> Optional[str]:
        """
        Complete a module and return the next module ID.

        A locked or unknown module is not completed; the refusal is logged.

        Args:
            module_id: ID of module to complete
            score: Optional quiz score (0-100)

        Returns:
            ID of the next incomplete module, or None if the curriculum is complete
        """
        if self.can_complete(module_id):
            self.store.complete_module(module_id, score)
        else:
            logger.info(f"Refused to complete locked module {module_id}")
        return self.get_next_module_id()

    def submit_assessment(self, module_id: str, answers: dict[str, str]) -> Optional[AssessmentResult]:
        """
        Grade a module's assessment, completing the module when passed.

        Returns None for unknown or locked modules and modules without an
        assessment. A failed submission leaves progress untouched.
        """
        module = self.curriculum.get_module(module_id)
        if module is None or module.assessment is None:
            return None
        if not self.can_complete(module_id):
            logger.info(f"Refused assessment for locked module {module_id}")
            return None

        result = grade_assessment(module.assessment, answers)
        if result.passed:
            self.store.complete_module(module_id, result.percent)
        else:
            logger.info(
                f"Assessment for {module_id} not passed: {result.percent}% "
                f"(needs {result.passing_score}%)"
            )
        return result

    # -------------------------------------------------------------------------
    # Certificate
    # -------------------------------------------------------------------------

    def is_certificate_eligible(self) -> bool:
        return gating.compute_certificate_eligibility(self.store.record, self.curriculum.module_ids)

    def claim_certificate(self) -> bool:
        """
        Earn the certificate if every requirement is met.

        Returns True when the certificate is (or already was) earned.
        """
        if self.store.record.certificate_earned:
            return True
        if not self.is_certificate_eligible():
            return False
        self.store.earn_certificate()
        return True

    def get_certificate_summary(self) -> Optional[CertificateSummary]:
        """Certificate details, or None until the certificate is earned."""
        record = self.store.record
        if not record.certificate_earned or record.certificate_date is None:
            return None

        known = set(self.curriculum.module_ids)
        entries = [p for mid, p in record.module_progress.items() if mid in known]
        total_ms = sum(p.time_spent_ms for p in entries)
        scores = [p.score for p in entries if p.score is not None]
        average = round_half_up(sum(scores) / len(scores)) if scores else 100

        return CertificateSummary(
            earned_at=record.certificate_date,
            modules_completed=[
                m.title for m in self.curriculum.modules if m.id in record.completed_modules
            ],
            total_time_spent=format_elapsed(total_ms),
            average_score=average,
        )

    # -------------------------------------------------------------------------
    # Progress Summary
    # -------------------------------------------------------------------------

    def get_progress_summary(self) -> dict:
        """Get progress summary for display."""
        record = self.store.record
        module_ids = self.curriculum.module_ids
        completed = [mid for mid in module_ids if mid in record.completed_modules]
        scores = [score for mid, score in record.quiz_scores.items() if mid in module_ids]

        return {
            "total_modules": len(module_ids),
            "completed": len(completed),
            "completion_percent": gating.get_overall_progress_percent(record, module_ids),
            "safety_acknowledged": gating.is_safety_acknowledged(record),
            "current_module_id": record.current_module,
            "next_module_id": gating.get_next_module(record, module_ids),
            "average_quiz_score": round_half_up(sum(scores) / len(scores)) if scores else 0,
            "total_time_spent": format_elapsed(
                sum(p.time_spent_ms for mid, p in record.module_progress.items() if mid in module_ids)
            ),
            "certificate_eligible": gating.compute_certificate_eligibility(record, module_ids),
            "certificate_earned": record.certificate_earned,
        }
