"""
Progress Pydantic Models

Per user-concept scheduling state and the result of one scheduler run.
Ranges are checked by the scheduler (services/spaced_repetition.py) rather
than by the model, so malformed records surface as InvalidInputError with a
message naming the offending field.
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class LearningProgressState(BaseModel):
    """
    Mastery and scheduling state for one user-concept pair.

    Example:
    {
        "comprehension": 24,
        "practice": 10,
        "ease_factor": 2.5,
        "interval": 3,
        "review_count": 1,
        "next_review_date": "2025-01-04",
        "last_reviewed_at": "2025-01-01",
        "total_study_time": 185
    }
    """
    model_config = ConfigDict(frozen=True)

    comprehension: int = Field(default=0, description="Conceptual understanding, 0-100")
    practice: int = Field(default=0, description="Repetition/exposure estimate, 0-100")
    ease_factor: float = Field(default=2.5, description="Interval growth multiplier, >= 1.3")
    interval: int = Field(default=1, description="Days until the next scheduled review, >= 1")
    review_count: int = Field(default=0, description="Completed review sessions")
    next_review_date: Optional[date] = None
    last_reviewed_at: Optional[date] = None
    total_study_time: int = Field(default=0, description="Cumulative study time in seconds")


class ScheduleResult(BaseModel):
    """Outcome of applying one completed quiz session to a progress record"""
    model_config = ConfigDict(frozen=True)

    progress: LearningProgressState
    quality: int
    correct_count: int
    total_questions: int
    lapsed: bool = Field(description="True when the quality fell below the pass threshold")
