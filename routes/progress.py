"""
Progress Routes - Read-only views of a user's learning progress.

- GET /progress/ - All concepts the user has studied
- GET /progress/due - Concepts due for review, most overdue first
- GET /progress/stats - Aggregated study statistics
- GET /progress/<concept_id> - Progress on a single concept
"""

import logging

from flask import Blueprint, jsonify, request
from flask_login import login_required, current_user

from services.learning_progress_service import get_all_progress, get_learning_progress
from services.review_queue_service import ReviewQueueService

logger = logging.getLogger(__name__)

bp = Blueprint('progress', __name__, url_prefix='/progress')


@bp.route('/', methods=['GET'])
@login_required
def list_progress():
    try:
        rows = get_all_progress(current_user.id)
        return jsonify({
            'progress': [row.to_dict() for row in rows],
            'count': len(rows)
        })
    except ValueError as e:
        return jsonify({'error': str(e)}), 400
    except Exception as e:
        logger.error(f"Error listing progress for user_id={current_user.id}: {str(e)}", exc_info=True)
        return jsonify({'error': f'Server error: {str(e)}'}), 500


@bp.route('/due', methods=['GET'])
@login_required
def due_concepts():
    """
    Concepts whose next review date has arrived.

    Query Parameters:
        limit (int, optional): Maximum number of concepts

    Returns:
        200: {"due": [{"concept_id": 42, "concept_name": "...", "days_overdue": 2, ...}], "count": 1}
    """
    try:
        limit = request.args.get('limit', type=int)
        due = ReviewQueueService.get_due_concepts(current_user.id, limit=limit)
        return jsonify({'due': due, 'count': len(due)})
    except ValueError as e:
        return jsonify({'error': str(e)}), 400
    except Exception as e:
        logger.error(f"Error listing due concepts for user_id={current_user.id}: {str(e)}", exc_info=True)
        return jsonify({'error': f'Server error: {str(e)}'}), 500


@bp.route('/stats', methods=['GET'])
@login_required
def study_statistics():
    try:
        return jsonify(ReviewQueueService.get_study_statistics(current_user.id))
    except Exception as e:
        logger.error(f"Error computing statistics for user_id={current_user.id}: {str(e)}", exc_info=True)
        return jsonify({'error': f'Server error: {str(e)}'}), 500


@bp.route('/<int:concept_id>', methods=['GET'])
@login_required
def concept_progress(concept_id):
    """
    Progress on one concept.

    Returns:
        200: {"progress": {...}}
        404: The user has not studied this concept yet
    """
    try:
        progress = get_learning_progress(current_user.id, concept_id)
        if progress is None:
            return jsonify({'error': f'No progress recorded for concept {concept_id}'}), 404
        return jsonify({'progress': progress.to_dict()})
    except Exception as e:
        logger.error(
            f"Error loading progress for user_id={current_user.id}, concept_id={concept_id}: {str(e)}",
            exc_info=True
        )
        return jsonify({'error': f'Server error: {str(e)}'}), 500
