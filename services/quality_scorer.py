"""
Quality Scorer - Turns a finished quiz attempt into a 1-5 quality value.

The quality blends objective performance (share of correct answers) with the
learner's own rating of the session:

    quality = round(correct_ratio * 5 * 0.7 + self_rating * 0.3)

clamped to [1, 5]. Objective performance dominates; the self-rating dampens
both over- and under-confidence. Pure functions, no side effects.
"""

import logging
from typing import Optional

from services.exceptions import EmptyQuizAttemptError, InvalidInputError
from services.learning_models import QuizAttempt
from services.learning_policy import DEFAULT_POLICY, QualityPolicy
from services.math_utils import clamp, round_half_up, to_decimal

logger = logging.getLogger(__name__)


def calculate_quality(
    correct_count: int,
    total_questions: int,
    self_rating: int,
    policy: Optional[QualityPolicy] = None
) -> int:
    """
    Compute the session quality from raw counts.

    Args:
        correct_count: Number of questions answered correctly
        total_questions: Number of questions answered
        self_rating: User self-assessment (1-5)
        policy: Weights and bounds (defaults to the 70/30 split)

    Returns:
        int: Quality value in [policy.min_quality, policy.max_quality]

    Raises:
        EmptyQuizAttemptError: If total_questions is 0
        InvalidInputError: If counts are negative, correct exceeds total,
                           or self_rating is out of range

    Examples:
        >>> calculate_quality(correct_count=8, total_questions=10, self_rating=4)
        4
        >>> calculate_quality(correct_count=10, total_questions=10, self_rating=5)
        5
    """
    policy = policy or DEFAULT_POLICY.quality

    if not isinstance(total_questions, int) or isinstance(total_questions, bool):
        raise InvalidInputError(f"total_questions must be an integer, got: {total_questions!r}")
    if not isinstance(correct_count, int) or isinstance(correct_count, bool):
        raise InvalidInputError(f"correct_count must be an integer, got: {correct_count!r}")
    if not isinstance(self_rating, int) or isinstance(self_rating, bool):
        raise InvalidInputError(f"self_rating must be an integer, got: {self_rating!r}")

    if total_questions == 0:
        raise EmptyQuizAttemptError("Cannot score an empty quiz attempt (0 questions answered)")
    if total_questions < 0:
        raise InvalidInputError(f"total_questions cannot be negative, got: {total_questions}")
    if correct_count < 0 or correct_count > total_questions:
        raise InvalidInputError(
            f"correct_count must be between 0 and {total_questions}, got: {correct_count}"
        )
    if not policy.min_self_rating <= self_rating <= policy.max_self_rating:
        raise InvalidInputError(
            f"self_rating must be between {policy.min_self_rating} and "
            f"{policy.max_self_rating}, got: {self_rating}"
        )

    correct_ratio = to_decimal(correct_count) / to_decimal(total_questions)
    raw = (
        correct_ratio * policy.max_quality * to_decimal(policy.performance_weight)
        + to_decimal(self_rating) * to_decimal(policy.self_rating_weight)
    )
    quality = clamp(round_half_up(raw), policy.min_quality, policy.max_quality)

    logger.debug(
        f"Scored quiz attempt: correct={correct_count}/{total_questions}, "
        f"self_rating={self_rating}, raw={raw}, quality={quality}"
    )
    return quality


def score_quiz_attempt(attempt: QuizAttempt, policy: Optional[QualityPolicy] = None) -> int:
    """
    Compute the session quality of a QuizAttempt.

    Raises:
        EmptyQuizAttemptError: If the attempt has no answered questions
        InvalidInputError: If the self rating is out of range
    """
    return calculate_quality(
        correct_count=attempt.correct_count,
        total_questions=attempt.total_questions,
        self_rating=attempt.self_rating,
        policy=policy
    )
