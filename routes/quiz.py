"""
Quiz Routes - Endpoints for adaptive concept quizzes.

This module provides API endpoints for the quiz flow:
- GET /quiz/<concept_id>/questions - Questions for the next session at the learner's level
- POST /quiz/<concept_id>/complete - Submit a finished session and reschedule the concept
"""

import logging

from flask import Blueprint, current_app, jsonify, request
from flask_login import login_required, current_user

from models import db
from services.exceptions import NotFoundError
from services.learning_progress_service import complete_quiz_session
from services.question_service import QuestionService

logger = logging.getLogger(__name__)

bp = Blueprint('quiz', __name__, url_prefix='/quiz')


@bp.route('/<int:concept_id>/questions', methods=['GET'])
@login_required
def get_questions(concept_id):
    """
    Get the questions for the next quiz session on a concept.

    The difficulty tier follows the user's comprehension of the concept:
    below 50 basic, 50-79 medium, 80 and above advanced. A concept the user
    has never reviewed starts at basic.

    Query Parameters:
        limit (int, optional): Maximum number of questions (default from config)

    Returns:
        200: Selected questions
            {
                "concept_id": 42,
                "difficulty": "medium",
                "focus_areas": [],
                "questions": [{"id": 7, "difficulty": "medium", "text": "...", ...}],
                "progress": {"comprehension": 62, ...} or null
            }
        400: Invalid limit
        404: Concept not found
        500: Server error
    """
    try:
        limit = request.args.get('limit', type=int)
        if limit is None:
            limit = current_app.config.get('DEFAULT_QUESTION_LIMIT')

        result = QuestionService.get_next_questions(
            user_id=current_user.id,
            concept_id=concept_id,
            limit=limit
        )
        return jsonify(result)

    except NotFoundError as e:
        return jsonify({'error': str(e)}), 404
    except ValueError as e:
        return jsonify({'error': str(e)}), 400
    except Exception as e:
        logger.error(f"Error selecting questions for concept_id={concept_id}: {str(e)}", exc_info=True)
        return jsonify({'error': f'Server error: {str(e)}'}), 500


@bp.route('/<int:concept_id>/complete', methods=['POST'])
@login_required
def complete_quiz(concept_id):
    """
    Submit a finished quiz session.

    Scores the session (70% correctness, 30% self rating), applies the SM-2
    scheduler to the user's progress on the concept and stores the result.

    Request Body:
        {
            "answers": [{"difficulty": "basic", "is_correct": true, "question_id": 7}, ...],
            "self_rating": 4,
            "elapsed_seconds": 300
        }

    Returns:
        200: Updated progress
            {
                "quality": 4,
                "correct_count": 8,
                "total_questions": 10,
                "lapsed": false,
                "progress": {"comprehension": 24, "interval": 3, ...},
                "next_review_date": "2025-01-04"
            }
        400: Missing or invalid fields (including an empty answer list)
        404: Concept not found
        500: Server error
    """
    try:
        data = request.get_json(silent=True)

        if not data:
            return jsonify({'error': 'No JSON data provided'}), 400

        if 'answers' not in data or 'self_rating' not in data:
            return jsonify({'error': 'Missing required fields: answers, self_rating'}), 400

        result = complete_quiz_session(
            user_id=current_user.id,
            concept_id=concept_id,
            answers=data['answers'],
            self_rating=data['self_rating'],
            elapsed_seconds=data.get('elapsed_seconds', 0)
        )

        return jsonify({
            'quality': result['quality'],
            'correct_count': result['correct_count'],
            'total_questions': result['total_questions'],
            'lapsed': result['lapsed'],
            'progress': result['progress'],
            'next_review_date': result['next_review_date'].isoformat() if result['next_review_date'] else None
        })

    except NotFoundError as e:
        return jsonify({'error': str(e)}), 404
    except ValueError as e:
        return jsonify({'error': str(e)}), 400
    except Exception as e:
        db.session.rollback()
        logger.error(f"Error completing quiz for concept_id={concept_id}: {str(e)}", exc_info=True)
        return jsonify({'error': f'Server error: {str(e)}'}), 500
