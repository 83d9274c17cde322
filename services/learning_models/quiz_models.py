"""
Quiz Pydantic Models

A quiz attempt is ephemeral: it lives for one learning session and is only
summarized (StudySession) once the scheduler has consumed it.
"""

from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

DIFFICULTY_BASIC = 'basic'
DIFFICULTY_MEDIUM = 'medium'
DIFFICULTY_ADVANCED = 'advanced'

VALID_DIFFICULTIES = [DIFFICULTY_BASIC, DIFFICULTY_MEDIUM, DIFFICULTY_ADVANCED]

Difficulty = Literal['basic', 'medium', 'advanced']


class AnsweredQuestion(BaseModel):
    """One answered question of a quiz attempt"""
    model_config = ConfigDict(frozen=True)

    difficulty: Difficulty
    is_correct: bool
    question_id: Optional[int] = None


class QuizAttempt(BaseModel):
    """
    A finished quiz session.

    Example:
    {
        "answers": [{"difficulty": "basic", "is_correct": true}, ...],
        "self_rating": 4,
        "elapsed_seconds": 180
    }
    """
    model_config = ConfigDict(frozen=True)

    answers: List[AnsweredQuestion] = Field(default_factory=list)
    self_rating: int = Field(description="User self-assessment collected at session end, 1-5")
    elapsed_seconds: int = Field(default=0, description="Wall-clock duration of the session")

    @property
    def total_questions(self) -> int:
        return len(self.answers)

    @property
    def correct_count(self) -> int:
        return sum(1 for answer in self.answers if answer.is_correct)


class QuestionCandidate(BaseModel):
    """A question as supplied by the external question source"""
    model_config = ConfigDict(frozen=True)

    id: Optional[int] = None
    difficulty: Difficulty
    text: str = ''
    options: Optional[List[str]] = None
    correct_answer: Optional[Any] = None
    explanation: Optional[str] = None


class QuestionSelection(BaseModel):
    """Difficulty tier chosen for a concept and the questions that match it"""
    model_config = ConfigDict(frozen=True)

    difficulty: Difficulty
    focus_areas: List[str] = Field(default_factory=list)
    questions: List[QuestionCandidate] = Field(default_factory=list)
