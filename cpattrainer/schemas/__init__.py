"""
CPAT Trainer Schemas - Pydantic models for the training engine.

This module exports all schema classes for:
- Curriculum: modules, sections, prerequisites, assessments
- Progress: the persisted learner progress record
"""

# Curriculum schemas
from .curriculum import (
    SAFETY_GATE_ID,
    Question,
    Assessment,
    Section,
    Module,
    Curriculum,
)

# Progress schemas
from .progress import (
    ModuleStatus,
    SafetyAcknowledgment,
    ModuleProgress,
    ProgressRecord,
)

__all__ = [
    # Curriculum
    'SAFETY_GATE_ID',
    'Question',
    'Assessment',
    'Section',
    'Module',
    'Curriculum',
    # Progress
    'ModuleStatus',
    'SafetyAcknowledgment',
    'ModuleProgress',
    'ProgressRecord',
]
