"""
Learning Engine Pydantic Models

Immutable records exchanged with the adaptive learning engine:
- Progress models (LearningProgressState, ScheduleResult)
- Quiz models (AnsweredQuestion, QuizAttempt, QuestionCandidate, QuestionSelection)
- Resource models (ResourceCandidate, LearningStyleFit, LearningStyleProfile, RankedResource)
"""

from .progress_models import LearningProgressState, ScheduleResult
from .quiz_models import (
    DIFFICULTY_BASIC,
    DIFFICULTY_MEDIUM,
    DIFFICULTY_ADVANCED,
    VALID_DIFFICULTIES,
    AnsweredQuestion,
    QuizAttempt,
    QuestionCandidate,
    QuestionSelection
)
from .resource_models import (
    LEARNING_MODALITIES,
    LearningStyleFit,
    LearningStyleProfile,
    ResourceCandidate,
    RankedResource
)

__all__ = [
    'LearningProgressState',
    'ScheduleResult',
    'DIFFICULTY_BASIC',
    'DIFFICULTY_MEDIUM',
    'DIFFICULTY_ADVANCED',
    'VALID_DIFFICULTIES',
    'AnsweredQuestion',
    'QuizAttempt',
    'QuestionCandidate',
    'QuestionSelection',
    'LEARNING_MODALITIES',
    'LearningStyleFit',
    'LearningStyleProfile',
    'ResourceCandidate',
    'RankedResource'
]
