"""
Question Service - Picks the questions for a concept's next quiz session.

This service bridges the question store and the adaptive question selector:
it loads the learner's progress, lets the selector decide the difficulty
tier, and returns that tier's questions in insertion order.
"""

import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError

from models import db
from models.concept import Concept
from models.question import Question
from services.exceptions import InvalidInputError, NotFoundError, PersistenceError
from services.learning_models import QuestionCandidate, VALID_DIFFICULTIES
from services.learning_policy import get_learning_policy
from services.learning_progress_service import load_progress
from services.question_selector import select_questions

# Configure logging
logger = logging.getLogger(__name__)


class QuestionService:
    """Service to load concept questions and select the next session's set"""

    @staticmethod
    def load_questions_for_concept(concept_id: int, difficulty: Optional[str] = None) -> List[QuestionCandidate]:
        """
        Load the questions of a concept in insertion order.

        Args:
            concept_id (int): The ID of the concept
            difficulty (str, optional): Restrict to one tier ('basic', 'medium', 'advanced')

        Returns:
            List[QuestionCandidate]: Questions ordered by id

        Raises:
            InvalidInputError: If difficulty is not a known tier
            PersistenceError: If the query fails
        """
        if difficulty is not None and difficulty not in VALID_DIFFICULTIES:
            raise InvalidInputError(
                f"Invalid difficulty: '{difficulty}'. Valid difficulties: {', '.join(VALID_DIFFICULTIES)}"
            )

        try:
            query = Question.query.filter_by(concept_id=concept_id)
            if difficulty is not None:
                query = query.filter_by(difficulty=difficulty)
            rows = query.order_by(Question.id.asc()).all()
        except SQLAlchemyError as e:
            logger.error(f"Database error loading questions for concept_id={concept_id}: {str(e)}", exc_info=True)
            raise PersistenceError(f"Failed to load questions: {str(e)}") from e

        return [
            QuestionCandidate(
                id=row.id,
                difficulty=row.difficulty,
                text=row.text,
                options=row.options,
                correct_answer=row.correct_answer,
                explanation=row.explanation
            )
            for row in rows
        ]

    @staticmethod
    def get_next_questions(user_id: int, concept_id: int, limit: Optional[int] = None) -> dict:
        """
        Select the questions for the user's next session on a concept.

        Workflow:
        1. Load the user's progress for the concept (None if never reviewed)
        2. Let the selector map comprehension to a difficulty tier
        3. Load that tier's questions and keep the first `limit`

        Args:
            user_id (int): The ID of the user taking the quiz
            concept_id (int): The ID of the concept
            limit (int, optional): Maximum number of questions

        Returns:
            dict: {
                'concept_id': int,
                'difficulty': str,
                'focus_areas': list,
                'questions': list of question dicts,
                'progress': dict or None
            }

        Raises:
            NotFoundError: If the concept does not exist
            InvalidInputError: If limit is negative
            PersistenceError: If a query fails
        """
        try:
            concept = db.session.get(Concept, concept_id)
        except SQLAlchemyError as e:
            logger.error(f"Database error retrieving concept {concept_id}: {str(e)}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve concept: {str(e)}") from e
        if concept is None:
            raise NotFoundError(f"Concept {concept_id} not found")

        policy = get_learning_policy()
        progress = load_progress(user_id, concept_id)

        selection = select_questions(
            QuestionService.load_questions_for_concept(concept_id),
            progress=progress,
            limit=limit,
            policy=policy.selector
        )

        logger.info(
            f"Selected {len(selection.questions)} '{selection.difficulty}' questions for "
            f"user_id={user_id}, concept_id={concept_id} (has_progress={progress is not None})"
        )

        return {
            'concept_id': concept_id,
            'difficulty': selection.difficulty,
            'focus_areas': list(selection.focus_areas),
            'questions': [question.model_dump() for question in selection.questions],
            'progress': progress.model_dump(mode='json') if progress else None
        }
