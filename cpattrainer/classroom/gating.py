"""
Gating - Read-only access decisions over a progress record.

Every function here is pure: it looks at a ProgressRecord and the static
Curriculum and never mutates either. State transitions live in
ProgressStore.

Module ids that the curriculum does not know (stale or hand-edited data)
are inert: they never unlock anything, count towards progress or make a
learner eligible for the certificate.
"""

from typing import Iterable, Optional, Sequence

from cpattrainer.schemas import SAFETY_GATE_ID, Curriculum, ModuleStatus, ProgressRecord
from cpattrainer.utils import percent


def is_safety_acknowledged(record: ProgressRecord) -> bool:
    ack = record.safety_acknowledged
    return ack is not None and ack.acknowledged


def get_missing_prerequisites(record: ProgressRecord, curriculum: Curriculum, module_id: str) -> list[str]:
    """
    List the prerequisites of a module that are not yet satisfied.

    The safety gate is reported as SAFETY_GATE_ID. Unknown modules have
    no prerequisites to report and return an empty list.
    """
    module = curriculum.get_module(module_id)
    if module is None:
        return []

    missing = []
    if not is_safety_acknowledged(record):
        missing.append(SAFETY_GATE_ID)

    completed = set(record.completed_modules)
    missing.extend(p for p in module.module_prerequisites if p not in completed)
    return missing


def is_module_accessible(record: ProgressRecord, curriculum: Curriculum, module_id: str) -> bool:
    """Safety acknowledged, module known, and all prerequisite modules completed."""
    if not is_safety_acknowledged(record):
        return False
    if module_id not in curriculum:
        return False
    return not get_missing_prerequisites(record, curriculum, module_id)


def get_accessible_modules(record: ProgressRecord, curriculum: Curriculum) -> list[str]:
    """Ids of every accessible module, in curriculum order."""
    return [
        module_id for module_id in curriculum.module_ids
        if is_module_accessible(record, curriculum, module_id)
    ]


def compute_module_status(record: ProgressRecord, curriculum: Curriculum, module_id: str) -> ModuleStatus:
    """
    Classify a module for journey display.

    Exactly one status applies, checked in this order:
    completed, current, upcoming (accessible), locked.
    Unknown module ids are locked.
    """
    if module_id not in curriculum:
        return ModuleStatus.LOCKED
    if module_id in record.completed_modules:
        return ModuleStatus.COMPLETED
    if module_id == record.current_module:
        return ModuleStatus.CURRENT
    if is_module_accessible(record, curriculum, module_id):
        return ModuleStatus.UPCOMING
    return ModuleStatus.LOCKED


def compute_certificate_eligibility(record: ProgressRecord, all_module_ids: Iterable[str]) -> bool:
    """
    Every curriculum module completed and safety acknowledged.

    An empty curriculum never makes anyone eligible.
    """
    required = set(all_module_ids)
    if not required:
        return False
    if not is_safety_acknowledged(record):
        return False
    return required.issubset(record.completed_modules)


def get_next_module(record: ProgressRecord, ordered_module_ids: Sequence[str]) -> Optional[str]:
    """First module in curriculum order that is not completed, or None."""
    completed = set(record.completed_modules)
    for module_id in ordered_module_ids:
        if module_id not in completed:
            return module_id
    return None


def get_overall_progress_percent(record: ProgressRecord, module_ids: Sequence[str]) -> int:
    """Completed share of the curriculum as an integer 0..100 (0 for an empty curriculum)."""
    known = set(module_ids)
    completed = known.intersection(record.completed_modules)
    return percent(len(completed), len(known))
