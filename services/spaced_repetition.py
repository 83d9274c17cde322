"""Spaced repetition scheduler (SM-2 family) for per-concept learning progress"""

import logging
from datetime import date, timedelta
from typing import Optional, Tuple

from services.exceptions import EmptyQuizAttemptError, InvalidInputError
from services.learning_models import LearningProgressState, QuizAttempt, ScheduleResult
from services.learning_policy import DEFAULT_POLICY, SchedulerPolicy
from services.math_utils import clamp, round_half_up, to_decimal

logger = logging.getLogger(__name__)

MIN_QUALITY = 0
MAX_QUALITY = 5


class SpacedRepetitionService:
    """
    Implements the SM-2 (SuperMemo-2) spaced repetition algorithm over
    LearningProgressState records.

    One completed quiz session produces exactly one recompute of the record:
    interval and ease factor follow SM-2, comprehension is a slow-moving blend
    of its previous value and this session's percent-correct, and practice
    grows by a fixed increment per session.
    """

    def __init__(self, policy: Optional[SchedulerPolicy] = None):
        self.policy = policy or DEFAULT_POLICY.scheduler

    def initial_progress(self) -> LearningProgressState:
        """State of a concept that has never been reviewed"""
        return LearningProgressState(
            comprehension=0,
            practice=0,
            ease_factor=self.policy.initial_ease_factor,
            interval=self.policy.initial_interval,
            review_count=0,
            next_review_date=None,
            last_reviewed_at=None,
            total_study_time=0
        )

    def calculate_next_review(
        self,
        quality: int,
        current_interval: int,
        current_ease: float
    ) -> Tuple[int, float]:
        """
        Calculate the next interval and ease factor using SM-2

        Args:
            quality: Quality of the session (0-5)
                    0-2: failed review, interval resets to 1
                    3-4: passed with difficulty
                    5: perfect session
            current_interval: Current review interval in days
            current_ease: Current ease factor (2.5 initially)

        Returns:
            Tuple of (new_interval, new_ease_factor)
        """
        min_ease = self.policy.min_ease_factor

        if quality < self.policy.pass_threshold:
            return 1, max(min_ease, current_ease)

        penalty = MAX_QUALITY - quality
        ease = to_decimal(current_ease) + (
            to_decimal('0.1') - penalty * (to_decimal('0.08') + penalty * to_decimal('0.02'))
        )
        # Two decimals, the precision the ease factor has always been stored with
        new_ease = max(min_ease, round(float(ease), 2))

        new_interval = max(1, round_half_up(to_decimal(current_interval) * to_decimal(new_ease)))
        if self.policy.max_interval_days is not None:
            new_interval = min(new_interval, self.policy.max_interval_days)

        return new_interval, new_ease

    def schedule_review(
        self,
        progress: Optional[LearningProgressState],
        quality: int,
        attempt: QuizAttempt,
        today: Optional[date] = None
    ) -> ScheduleResult:
        """
        Apply one completed quiz session to a progress record.

        Args:
            progress: Prior state, or None for a concept never reviewed
            quality: Session quality from the quality scorer
            attempt: The quiz attempt the quality was derived from
            today: Review date (defaults to date.today())

        Returns:
            ScheduleResult with the new progress and the correct-answer count

        Raises:
            InvalidInputError: If quality is out of range, the prior record is
                               malformed, or the attempt reports negative time
            EmptyQuizAttemptError: If the attempt has no answered questions

        Example:
            >>> attempt = QuizAttempt(answers=[...8 correct of 10...], self_rating=4)
            >>> result = service.schedule_review(None, 4, attempt, date(2025, 1, 1))
            >>> result.progress.interval, result.progress.comprehension
            (3, 24)
        """
        today = today or date.today()

        if not isinstance(quality, int) or isinstance(quality, bool):
            raise InvalidInputError(f"quality must be an integer, got: {quality!r}")
        if not MIN_QUALITY <= quality <= MAX_QUALITY:
            raise InvalidInputError(
                f"quality must be between {MIN_QUALITY} and {MAX_QUALITY}, got: {quality}"
            )
        if attempt.total_questions == 0:
            raise EmptyQuizAttemptError("Cannot schedule a review from an empty quiz attempt")
        if attempt.elapsed_seconds < 0:
            raise InvalidInputError(
                f"elapsed_seconds cannot be negative, got: {attempt.elapsed_seconds}"
            )

        if progress is None:
            progress = self.initial_progress()
            logger.debug("No prior progress, starting from initial state")
        else:
            validate_progress(progress, self.policy)

        new_interval, new_ease = self.calculate_next_review(
            quality=quality,
            current_interval=progress.interval,
            current_ease=progress.ease_factor
        )
        # next_review_date must stay representable even without a configured cap
        latest_interval = (date.max - today).days
        if new_interval > latest_interval:
            logger.warning(f"Interval {new_interval} runs past date.max, limiting to {latest_interval}")
            new_interval = max(1, latest_interval)

        blended = (
            to_decimal(progress.comprehension) * to_decimal(self.policy.comprehension_retention_weight)
            + to_decimal(attempt.correct_count) * 100 / to_decimal(attempt.total_questions)
            * to_decimal(self.policy.session_score_weight)
        )
        new_comprehension = clamp(round_half_up(blended), 0, 100)
        new_practice = clamp(progress.practice + self.policy.practice_increment, 0, 100)

        new_progress = LearningProgressState(
            comprehension=new_comprehension,
            practice=new_practice,
            ease_factor=new_ease,
            interval=new_interval,
            review_count=progress.review_count + 1,
            next_review_date=today + timedelta(days=new_interval),
            last_reviewed_at=today,
            total_study_time=progress.total_study_time + attempt.elapsed_seconds
        )

        lapsed = quality < self.policy.pass_threshold
        logger.debug(
            f"Scheduled review: quality={quality}, lapsed={lapsed}, "
            f"interval {progress.interval}->{new_interval}, "
            f"ease {progress.ease_factor}->{new_ease}, "
            f"comprehension {progress.comprehension}->{new_comprehension}"
        )

        return ScheduleResult(
            progress=new_progress,
            quality=quality,
            correct_count=attempt.correct_count,
            total_questions=attempt.total_questions,
            lapsed=lapsed
        )


def validate_progress(progress: LearningProgressState, policy: Optional[SchedulerPolicy] = None) -> None:
    """
    Reject a malformed progress record.

    Raises:
        InvalidInputError: Naming the first field that violates its range
    """
    policy = policy or DEFAULT_POLICY.scheduler

    if not 0 <= progress.comprehension <= 100:
        raise InvalidInputError(f"comprehension must be between 0 and 100, got: {progress.comprehension}")
    if not 0 <= progress.practice <= 100:
        raise InvalidInputError(f"practice must be between 0 and 100, got: {progress.practice}")
    if progress.interval < 1:
        raise InvalidInputError(f"interval must be at least 1 day, got: {progress.interval}")
    if progress.ease_factor < policy.min_ease_factor:
        raise InvalidInputError(
            f"ease_factor must be at least {policy.min_ease_factor}, got: {progress.ease_factor}"
        )
    if progress.review_count < 0:
        raise InvalidInputError(f"review_count cannot be negative, got: {progress.review_count}")
    if progress.total_study_time < 0:
        raise InvalidInputError(f"total_study_time cannot be negative, got: {progress.total_study_time}")


def initial_progress(policy: Optional[SchedulerPolicy] = None) -> LearningProgressState:
    return SpacedRepetitionService(policy).initial_progress()


def schedule_review(
    progress: Optional[LearningProgressState],
    quality: int,
    attempt: QuizAttempt,
    today: Optional[date] = None,
    policy: Optional[SchedulerPolicy] = None
) -> ScheduleResult:
    """Module-level shortcut for SpacedRepetitionService(policy).schedule_review()"""
    return SpacedRepetitionService(policy).schedule_review(progress, quality, attempt, today)


def days_overdue(progress: LearningProgressState, today: Optional[date] = None) -> int:
    """Days past the scheduled review date, 0 when not yet due"""
    if progress.next_review_date is None:
        return 0
    return max(0, ((today or date.today()) - progress.next_review_date).days)
