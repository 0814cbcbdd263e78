"""
models/exam_model.py

Static exam descriptors shown by the catalog.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Difficulty(str, Enum):
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"

    @property
    def rank(self) -> int:
        """Ordering of the tiers, Easy < Medium < Hard."""
        return list(Difficulty).index(self)


class ExamDescriptor(BaseModel):
    """Catalog entry for one exam (reference data, never mutated)."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Exam identifier, also the question resource key")
    title: str = Field(..., description="Display title, e.g. 'January 2025'")
    subject: str = Field(..., description="Subject name")
    duration: str = Field(..., description="Duration label, e.g. '60 minutes'")
    questions: int = Field(..., ge=0, description="Advertised number of questions")
    difficulty: Difficulty
    description: str = ""
