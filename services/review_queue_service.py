"""
Review Queue Service - Finds concepts due for review and summarizes study activity.

Concepts become due when their scheduled next_review_date has arrived. The
queue is ordered by next_review_date ASC so the most overdue concept comes
first, which is what spaced repetition wants a learner to see next.
"""

import logging
from datetime import date
from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from models import db
from models.concept import Concept
from models.learning_progress import LearningProgress
from models.study_session import StudySession
from services.exceptions import InvalidInputError, PersistenceError
from services.learning_progress_service import to_progress_state
from services.spaced_repetition import days_overdue

# Configure logging
logger = logging.getLogger(__name__)


class ReviewQueueService:
    """Service to list due concepts and compute study statistics"""

    @staticmethod
    def get_due_concepts(
        user_id: int,
        today: Optional[date] = None,
        limit: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        """
        List the concepts whose review date has arrived.

        Args:
            user_id (int): The ID of the user
            today (date, optional): Reference date (defaults to date.today())
            limit (int, optional): Maximum number of concepts

        Returns:
            list: Progress dicts with 'concept_name' and 'days_overdue',
                  most overdue first

        Raises:
            InvalidInputError: If limit is negative
            PersistenceError: If the query fails

        Examples:
            >>> ReviewQueueService.get_due_concepts(user_id=1, today=date(2025, 1, 10))
            [{'concept_id': 42, 'concept_name': 'Binary search', 'days_overdue': 6, ...}]
        """
        if limit is not None and limit < 0:
            raise InvalidInputError(f"limit cannot be negative, got: {limit}")
        today = today or date.today()

        try:
            query = db.session.query(LearningProgress, Concept.name).join(
                Concept, LearningProgress.concept_id == Concept.id
            ).filter(
                LearningProgress.user_id == user_id,
                LearningProgress.next_review_date.isnot(None),
                LearningProgress.next_review_date <= today  # Due or overdue
            ).order_by(
                LearningProgress.next_review_date.asc(),
                LearningProgress.id.asc()
            )
            if limit is not None:
                query = query.limit(limit)
            rows = query.all()
        except SQLAlchemyError as e:
            logger.error(f"Database error listing due concepts for user_id={user_id}: {str(e)}", exc_info=True)
            raise PersistenceError(f"Failed to list due concepts: {str(e)}") from e

        due = []
        for progress, concept_name in rows:
            item = progress.to_dict()
            item['concept_name'] = concept_name
            item['days_overdue'] = days_overdue(to_progress_state(progress), today)
            due.append(item)

        logger.debug(f"Found {len(due)} due concepts for user_id={user_id} on {today}")
        return due

    @staticmethod
    def get_study_statistics(user_id: int, today: Optional[date] = None) -> Dict[str, Any]:
        """
        Aggregate a user's study activity across all concepts.

        Returns:
            dict: {
                'concepts_studied': int,
                'total_sessions': int,
                'total_study_time': int (seconds),
                'average_score': float (percent correct across sessions),
                'average_comprehension': float,
                'average_practice': float,
                'due_count': int
            }

        Raises:
            PersistenceError: If a query fails
        """
        today = today or date.today()

        try:
            progress_stats = db.session.query(
                func.count(LearningProgress.id),
                func.coalesce(func.sum(LearningProgress.total_study_time), 0),
                func.avg(LearningProgress.comprehension),
                func.avg(LearningProgress.practice)
            ).filter(LearningProgress.user_id == user_id).one()

            session_stats = db.session.query(
                func.count(StudySession.id),
                func.coalesce(func.sum(StudySession.correct_count), 0),
                func.coalesce(func.sum(StudySession.total_questions), 0)
            ).filter(StudySession.user_id == user_id).one()

            due_count = LearningProgress.query.filter(
                LearningProgress.user_id == user_id,
                LearningProgress.next_review_date.isnot(None),
                LearningProgress.next_review_date <= today
            ).count()
        except SQLAlchemyError as e:
            logger.error(f"Database error computing statistics for user_id={user_id}: {str(e)}", exc_info=True)
            raise PersistenceError(f"Failed to compute study statistics: {str(e)}") from e

        concepts_studied, total_study_time, avg_comprehension, avg_practice = progress_stats
        total_sessions, total_correct, total_questions = session_stats

        average_score = round(total_correct * 100.0 / total_questions, 1) if total_questions else 0.0

        return {
            'concepts_studied': concepts_studied,
            'total_sessions': total_sessions,
            'total_study_time': int(total_study_time),
            'average_score': average_score,
            'average_comprehension': round(float(avg_comprehension), 1) if avg_comprehension is not None else 0.0,
            'average_practice': round(float(avg_practice), 1) if avg_practice is not None else 0.0,
            'due_count': due_count
        }
