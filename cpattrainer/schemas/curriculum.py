"""
Curriculum schemas for CPAT Trainer.

Defines Pydantic models for the static curriculum graph:
- Assessment questions and passing score
- Module content sections
- Modules with prerequisites and safety flags
- The ordered curriculum
"""

from pydantic import BaseModel, Field
from typing import Optional

# Reserved prerequisite id standing for the global safety acknowledgment gate.
# It is not a module: it is satisfied by acknowledging the safety content.
SAFETY_GATE_ID = "safety-acknowledgment"


# -----------------------------------------------------------------------------
# Assessment
# -----------------------------------------------------------------------------


class Question(BaseModel):
    id: str
    question: str
    type: str = Field(default="multiple-choice", pattern=r'^(multiple-choice|true-false|scenario)$')
    options: list[str] = []
    correct: str | list[str]  # a list accepts any of its answers
    explanation: str = ""


class Assessment(BaseModel):
    """Quiz attached to a module. Scores are integer percentages."""
    questions: list[Question] = []
    passing_score: int = Field(default=80, ge=0, le=100)


# -----------------------------------------------------------------------------
# Modules
# -----------------------------------------------------------------------------


class Section(BaseModel):
    """One page of module content, shown in order."""
    id: str = Field(..., min_length=1)
    title: str
    content: str = ""  # markdown


class Module(BaseModel):
    id: str = Field(..., min_length=1)
    title: str
    position: int = Field(..., ge=1)  # 1-based curriculum order
    description: Optional[str] = None
    duration: str = ""  # as authored, e.g. "3-4 minutes"
    outcomes: list[str] = []
    sections: list[Section] = []
    safety_flags: list[str] = []
    prerequisites: list[str] = []  # module ids and/or SAFETY_GATE_ID
    assessment: Optional[Assessment] = None

    @property
    def module_prerequisites(self) -> list[str]:
        """Prerequisites that refer to modules (the safety gate excluded)."""
        return [p for p in self.prerequisites if p != SAFETY_GATE_ID]


class Curriculum(BaseModel):
    """
    Ordered list of modules.

    Modules are kept sorted by position; lookups by id return None
    for unknown ids rather than raising.
    """
    modules: list[Module]

    def model_post_init(self, __context):
        self.modules.sort(key=lambda m: m.position)

    @property
    def module_ids(self) -> list[str]:
        return [m.id for m in self.modules]

    def get_module(self, module_id: str) -> Optional[Module]:
        for module in self.modules:
            if module.id == module_id:
                return module
        return None

    def __contains__(self, module_id: object) -> bool:
        return any(m.id == module_id for m in self.modules)

    def __len__(self) -> int:
        return len(self.modules)

