"""
CPAT Trainer Classroom - Runtime components for the training engine.

This module provides:
- Storage backends for the persisted progress record
- ProgressStore: Hold, mutate and persist learner progress
- gating: Pure access and eligibility checks
- Curriculum loading and validation
- Assessment grading
- Navigator: Journey overview and gated actions
"""

from .storage import (
    STORAGE_ERRORS,
    Storage,
    MemoryStorage,
    SqliteStorage,
)

from .progress import (
    ProgressStore,
    STORAGE_KEY,
    SAFETY_CONTENT_VERSION,
    parse_record,
)

from .gating import (
    is_safety_acknowledged,
    is_module_accessible,
    get_missing_prerequisites,
    get_accessible_modules,
    compute_module_status,
    compute_certificate_eligibility,
    get_next_module,
    get_overall_progress_percent,
)

from .loader import (
    CurriculumError,
    DEFAULT_CURRICULUM_PATH,
    load_curriculum,
    parse_curriculum,
    validate_curriculum,
    estimate_total_duration,
)

from .assessment import (
    AssessmentResult,
    grade_assessment,
)

from .navigator import (
    Navigator,
    JourneyModule,
    CertificateSummary,
)

__all__ = [
    # Storage
    "STORAGE_ERRORS",
    "Storage",
    "MemoryStorage",
    "SqliteStorage",
    # Progress
    "ProgressStore",
    "STORAGE_KEY",
    "SAFETY_CONTENT_VERSION",
    "parse_record",
    # Gating
    "is_safety_acknowledged",
    "is_module_accessible",
    "get_missing_prerequisites",
    "get_accessible_modules",
    "compute_module_status",
    "compute_certificate_eligibility",
    "get_next_module",
    "get_overall_progress_percent",
    # Loader
    "CurriculumError",
    "DEFAULT_CURRICULUM_PATH",
    "load_curriculum",
    "parse_curriculum",
    "validate_curriculum",
    "estimate_total_duration",
    # Assessment
    "AssessmentResult",
    "grade_assessment",
    # Navigator
    "Navigator",
    "JourneyModule",
    "CertificateSummary",
]
