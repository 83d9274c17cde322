"""Learning Progress Service - Loads, schedules and persists per-concept learning progress"""
import logging
import threading
import weakref
from datetime import date, datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from models import db
from models.concept import Concept
from models.learning_progress import LearningProgress
from models.study_session import StudySession
from services.exceptions import InvalidInputError, NotFoundError, PersistenceError
from services.learning_models import AnsweredQuestion, LearningProgressState, QuizAttempt
from services.learning_policy import get_learning_policy
from services.quality_scorer import score_quiz_attempt
from services.spaced_repetition import SpacedRepetitionService

logger = logging.getLogger(__name__)

# Scheduler updates are read-modify-write and not commutative, so sessions for
# the same (user, concept) pair must be applied one at a time. A pair's entry
# goes away once no caller references its lock.
_progress_locks: 'weakref.WeakValueDictionary[Tuple[int, int], threading.Lock]' = weakref.WeakValueDictionary()
_progress_locks_guard = threading.Lock()


def get_progress_lock(user_id: int, concept_id: int) -> threading.Lock:
    """
    Return the in-process lock serializing progress updates for a user-concept pair.

    Args:
        user_id: The ID of the user
        concept_id: The ID of the concept

    Returns:
        threading.Lock shared by every caller using the same pair
    """
    key = (user_id, concept_id)
    with _progress_locks_guard:
        lock = _progress_locks.get(key)
        if lock is None:
            lock = threading.Lock()
            _progress_locks[key] = lock
        return lock


def _validate_id(name: str, value: Any) -> None:
    if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
        logger.error(f"Invalid {name}: {value}")
        raise InvalidInputError(f"{name} must be a positive integer, got: {value}")


def to_progress_state(progress: LearningProgress) -> LearningProgressState:
    """Convert a persisted LearningProgress row into the engine's immutable record"""
    return LearningProgressState(
        comprehension=progress.comprehension,
        practice=progress.practice,
        ease_factor=progress.ease_factor,
        interval=progress.interval_days,
        review_count=progress.review_count,
        next_review_date=progress.next_review_date,
        last_reviewed_at=progress.last_reviewed_at,
        total_study_time=progress.total_study_time
    )


def get_learning_progress(user_id: int, concept_id: int) -> Optional[LearningProgress]:
    """
    Get the learning progress row for a user-concept pair.

    Returns:
        The LearningProgress object if it exists, None otherwise

    Raises:
        PersistenceError: If the query fails
    """
    try:
        return LearningProgress.query.filter_by(
            user_id=user_id,
            concept_id=concept_id
        ).first()
    except SQLAlchemyError as e:
        logger.error(
            f"Database error retrieving progress for user_id={user_id}, "
            f"concept_id={concept_id}: {str(e)}",
            exc_info=True
        )
        raise PersistenceError(f"Failed to retrieve learning progress: {str(e)}") from e


def load_progress(user_id: int, concept_id: int) -> Optional[LearningProgressState]:
    """
    Load the scheduling state for a user-concept pair.

    Returns:
        LearningProgressState, or None if the concept was never reviewed

    Example:
        >>> load_progress(user_id=1, concept_id=42)
        LearningProgressState(comprehension=24, practice=10, ease_factor=2.5, interval=3, ...)
    """
    progress = get_learning_progress(user_id, concept_id)
    return to_progress_state(progress) if progress else None


def _stage_progress(user_id: int, concept_id: int, state: LearningProgressState) -> LearningProgress:
    """Write state onto the (possibly new) row without committing"""
    progress = get_learning_progress(user_id, concept_id)
    if progress is None:
        progress = LearningProgress(user_id=user_id, concept_id=concept_id)
        db.session.add(progress)

    progress.comprehension = state.comprehension
    progress.practice = state.practice
    progress.ease_factor = state.ease_factor
    progress.interval_days = state.interval
    progress.review_count = state.review_count
    progress.next_review_date = state.next_review_date
    progress.last_reviewed_at = state.last_reviewed_at
    progress.total_study_time = state.total_study_time
    progress.updated_at = datetime.now(timezone.utc)
    return progress


def save_progress(user_id: int, concept_id: int, state: LearningProgressState) -> LearningProgress:
    """
    Persist a progress record, creating the row on first save.

    Failures are rolled back and surfaced as PersistenceError; nothing is retried.

    Raises:
        PersistenceError: If the database write fails
    """
    try:
        progress = _stage_progress(user_id, concept_id, state)
        db.session.commit()
        logger.info(
            f"Saved learning progress: user_id={user_id}, concept_id={concept_id}, "
            f"interval={state.interval}, next_review_date={state.next_review_date}"
        )
        return progress
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(
            f"Failed to save learning progress for user_id={user_id}, concept_id={concept_id}: {str(e)}",
            exc_info=True
        )
        raise PersistenceError(f"Failed to save learning progress: {str(e)}") from e


def get_all_progress(user_id: int) -> List[LearningProgress]:
    """All progress rows of a user, soonest review first"""
    _validate_id('user_id', user_id)
    try:
        return LearningProgress.query.filter_by(user_id=user_id).order_by(
            LearningProgress.next_review_date.asc(),
            LearningProgress.id.asc()
        ).all()
    except SQLAlchemyError as e:
        logger.error(f"Database error listing progress for user_id={user_id}: {str(e)}", exc_info=True)
        raise PersistenceError(f"Failed to list learning progress: {str(e)}") from e


def build_quiz_attempt(
    answers: Iterable[Union[AnsweredQuestion, Dict[str, Any]]],
    self_rating: Any,
    elapsed_seconds: Any = 0
) -> QuizAttempt:
    """
    Build a QuizAttempt from request data.

    Raises:
        InvalidInputError: If any field has the wrong shape
    """
    if answers is None or isinstance(answers, (str, bytes, dict)):
        raise InvalidInputError("answers must be a list of answered questions")
    try:
        return QuizAttempt(
            answers=list(answers),
            self_rating=self_rating,
            elapsed_seconds=elapsed_seconds if elapsed_seconds is not None else 0
        )
    except ValidationError as e:
        raise InvalidInputError(f"Malformed quiz attempt: {e.errors()[0].get('msg', str(e))}") from e


def complete_quiz_session(
    user_id: int,
    concept_id: int,
    answers: Iterable[Union[AnsweredQuestion, Dict[str, Any]]],
    self_rating: int,
    elapsed_seconds: int = 0,
    today: Optional[date] = None
) -> dict:
    """
    Score a finished quiz session and update the concept's learning progress.

    This is the main function called when a user finishes a quiz. It:
    1. Validates the attempt (non-empty, self rating 1-5, non-negative time)
    2. Computes the session quality (70% correctness, 30% self rating)
    3. Applies the SM-2 scheduler to the stored progress (or a fresh record)
    4. Persists the new progress and a StudySession summary in one transaction

    Updates for the same user-concept pair are serialized with an in-process lock.

    Args:
        user_id: The ID of the user
        concept_id: The ID of the concept
        answers: Answered questions, each {'difficulty': str, 'is_correct': bool}
        self_rating: User self-assessment, 1-5
        elapsed_seconds: Session duration in seconds
        today: Review date (defaults to today)

    Returns:
        dict: {
            'quality': int,
            'correct_count': int,
            'total_questions': int,
            'lapsed': bool,
            'progress': dict,
            'next_review_date': date
        }

    Raises:
        InvalidInputError: If ids or the attempt are malformed
        NotFoundError: If the concept does not exist
        PersistenceError: If loading or saving fails

    Example:
        >>> result = complete_quiz_session(1, 42, answers, self_rating=4, elapsed_seconds=300)
        >>> result['quality'], result['progress']['interval']
        (4, 3)
    """
    _validate_id('user_id', user_id)
    _validate_id('concept_id', concept_id)

    attempt = build_quiz_attempt(answers, self_rating, elapsed_seconds)
    policy = get_learning_policy()
    quality = score_quiz_attempt(attempt, policy.quality)

    try:
        concept = db.session.get(Concept, concept_id)
    except SQLAlchemyError as e:
        logger.error(f"Database error retrieving concept {concept_id}: {str(e)}", exc_info=True)
        raise PersistenceError(f"Failed to retrieve concept: {str(e)}") from e
    if concept is None:
        logger.error(f"Concept not found: {concept_id}")
        raise NotFoundError(f"Concept {concept_id} not found")

    scheduler = SpacedRepetitionService(policy.scheduler)

    with get_progress_lock(user_id, concept_id):
        prior = load_progress(user_id, concept_id)
        result = scheduler.schedule_review(prior, quality, attempt, today)

        try:
            progress = _stage_progress(user_id, concept_id, result.progress)
            db.session.add(StudySession(
                user_id=user_id,
                concept_id=concept_id,
                total_questions=attempt.total_questions,
                correct_count=attempt.correct_count,
                self_rating=attempt.self_rating,
                quality=quality,
                elapsed_seconds=attempt.elapsed_seconds,
                resulting_interval=result.progress.interval
            ))
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(
                f"Failed to persist quiz session for user_id={user_id}, concept_id={concept_id}: {str(e)}",
                exc_info=True
            )
            raise PersistenceError(f"Failed to update learning progress: {str(e)}") from e

    logger.info(
        f"Completed quiz session: user_id={user_id}, concept_id={concept_id}, "
        f"correct={attempt.correct_count}/{attempt.total_questions}, quality={quality}, "
        f"interval={result.progress.interval}, next_review_date={result.progress.next_review_date}"
    )

    return {
        'quality': quality,
        'correct_count': result.correct_count,
        'total_questions': result.total_questions,
        'lapsed': result.lapsed,
        'progress': progress.to_dict(),
        'next_review_date': result.progress.next_review_date
    }
