"""
CPAT Trainer - Training progress and module gating for the CPAT curriculum.

Packages:
- schemas: Pydantic models for the curriculum, assessments and learner progress
- classroom: Runtime components (storage, progress store, gating, navigation)
"""

__version__ = "0.1.0"
