"""
Progress tracking schemas for CPAT Trainer.

Defines Pydantic models for learner progress including:
- Safety acknowledgment record
- Per-module attempt progress
- The full persisted progress record
- Module status for journey display

Persisted JSON uses camelCase keys (field aliases); Python code uses the
snake_case field names.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ModuleStatus(str, Enum):
    COMPLETED = "completed"
    CURRENT = "current"
    UPCOMING = "upcoming"
    LOCKED = "locked"


class SafetyAcknowledgment(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    acknowledged: bool = True
    timestamp: datetime
    version: str
    user_agent: str = Field(default="", alias="userAgent")


class ModuleProgress(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    completed: bool = False
    completed_at: Optional[datetime] = Field(default=None, alias="completedAt")
    time_spent_ms: int = Field(default=0, ge=0, alias="timeSpent")
    score: Optional[int] = Field(default=None, ge=0, le=100)
    attempts: int = Field(default=0, ge=0)


class ProgressRecord(BaseModel):
    """
    One learner's full training journey.

    certificate_eligible is a cache of a derived value; the progress store
    recomputes it from the curriculum instead of trusting the stored flag.
    """
    model_config = ConfigDict(populate_by_name=True)

    journey_started: bool = Field(default=False, alias="journeyStarted")
    safety_acknowledged: Optional[SafetyAcknowledgment] = Field(default=None, alias="safetyAcknowledged")
    completed_modules: list[str] = Field(default_factory=list, alias="completedModules")
    current_module: Optional[str] = Field(default=None, alias="currentModule")
    quiz_scores: dict[str, int] = Field(default_factory=dict, alias="quizScores")
    module_progress: dict[str, ModuleProgress] = Field(default_factory=dict, alias="moduleProgress")
    certificate_eligible: bool = Field(default=False, alias="certificateEligible")
    certificate_earned: bool = Field(default=False, alias="certificateEarned")
    certificate_date: Optional[datetime] = Field(default=None, alias="certificateDate")
    last_accessed: Optional[datetime] = Field(default=None, alias="lastAccessed")

    def to_json(self) -> str:
        """Serialize to the persisted camelCase layout."""
        return self.model_dump_json(by_alias=True)
