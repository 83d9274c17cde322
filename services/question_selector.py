"""
Adaptive Question Selector - Chooses the difficulty tier for the next quiz.

Difficulty follows the learner's comprehension of the concept:

- comprehension < 50       -> basic (core definitions, foundational principles)
- 50 <= comprehension < 80 -> medium (application and some analysis)
- comprehension >= 80      -> advanced (synthesis, evaluation, connections)

No progress yet means basic. Within a tier, questions keep the order the
question source returned them in, so a session is reproducible.
"""

import logging
from typing import Iterable, List, Optional

from services.exceptions import InvalidInputError
from services.learning_models import (
    DIFFICULTY_ADVANCED,
    DIFFICULTY_BASIC,
    DIFFICULTY_MEDIUM,
    LearningProgressState,
    QuestionCandidate,
    QuestionSelection
)
from services.learning_policy import DEFAULT_POLICY, SelectorPolicy

logger = logging.getLogger(__name__)

FOCUS_FUNDAMENTALS = 'fundamentals'


def select_difficulty(
    comprehension: Optional[int],
    policy: Optional[SelectorPolicy] = None
) -> str:
    """
    Map a comprehension score to a difficulty tier.

    Args:
        comprehension: Current comprehension (0-100), or None if no progress exists
        policy: Tier thresholds

    Returns:
        str: 'basic', 'medium' or 'advanced'

    Raises:
        InvalidInputError: If comprehension is outside 0-100

    Examples:
        >>> select_difficulty(49)
        'basic'
        >>> select_difficulty(50)
        'medium'
        >>> select_difficulty(None)
        'basic'
    """
    policy = policy or DEFAULT_POLICY.selector

    if comprehension is None:
        return DIFFICULTY_BASIC
    if isinstance(comprehension, bool) or not isinstance(comprehension, (int, float)):
        raise InvalidInputError(f"comprehension must be a number, got: {comprehension!r}")
    if not 0 <= comprehension <= 100:
        raise InvalidInputError(f"comprehension must be between 0 and 100, got: {comprehension}")

    if comprehension < policy.medium_threshold:
        return DIFFICULTY_BASIC
    if comprehension < policy.advanced_threshold:
        return DIFFICULTY_MEDIUM
    return DIFFICULTY_ADVANCED


def get_focus_areas(
    progress: Optional[LearningProgressState],
    policy: Optional[SelectorPolicy] = None
) -> List[str]:
    """
    Areas the next session should emphasize.

    A learner who has reviewed a concept several times and is still below the
    comprehension bar gets a fundamentals focus.
    """
    policy = policy or DEFAULT_POLICY.selector

    if progress is None:
        return []
    if (progress.review_count > policy.fundamentals_review_count
            and progress.comprehension < policy.fundamentals_comprehension):
        return [FOCUS_FUNDAMENTALS]
    return []


def select_questions(
    questions: Iterable[QuestionCandidate],
    progress: Optional[LearningProgressState] = None,
    limit: Optional[int] = None,
    policy: Optional[SelectorPolicy] = None
) -> QuestionSelection:
    """
    Pick the questions for the next session of a concept.

    Args:
        questions: Candidates from the question source, in insertion order
        progress: Current progress for the concept, or None if never reviewed
        limit: Maximum number of questions to return (None for all)
        policy: Tier thresholds

    Returns:
        QuestionSelection: chosen tier, focus areas and the matching questions
                           in their original order

    Raises:
        InvalidInputError: If limit is negative or progress comprehension is out of range
    """
    if limit is not None and limit < 0:
        raise InvalidInputError(f"limit cannot be negative, got: {limit}")

    comprehension = progress.comprehension if progress is not None else None
    difficulty = select_difficulty(comprehension, policy)

    matching = [question for question in questions if question.difficulty == difficulty]
    if limit is not None:
        matching = matching[:limit]

    focus_areas = get_focus_areas(progress, policy)

    logger.debug(
        f"Selected difficulty '{difficulty}' for comprehension={comprehension}: "
        f"{len(matching)} questions, focus_areas={focus_areas}"
    )

    return QuestionSelection(
        difficulty=difficulty,
        focus_areas=focus_areas,
        questions=matching
    )
