"""
Resource Routes - Ranked learning resources and resource interactions.

- GET /resources/concept/<concept_id> - Resources for a concept, best match first
- POST /resources/<resource_id>/interactions - Record a view, completion, save or rating
"""

import logging

from flask import Blueprint, current_app, jsonify, request
from flask_login import login_required, current_user

from models import db
from services.exceptions import NotFoundError
from services.resource_service import get_ranked_resources, record_interaction

logger = logging.getLogger(__name__)

bp = Blueprint('resources', __name__, url_prefix='/resources')


@bp.route('/concept/<int:concept_id>', methods=['GET'])
@login_required
def concept_resources(concept_id):
    """
    Rank a concept's resources for the current user.

    Query Parameters:
        limit (int, optional): Maximum number of resources (default from config)

    Returns:
        200: {"resources": [{"id": 7, "relevance_score": 71.5, "style_match": 82.0, ...}], "count": 1}
        400: Invalid limit
        404: Concept not found
        500: Server error
    """
    try:
        limit = request.args.get('limit', type=int)
        if limit is None:
            limit = current_app.config.get('DEFAULT_RESOURCE_LIMIT')

        resources = get_ranked_resources(current_user.id, concept_id, limit=limit)
        return jsonify({'resources': resources, 'count': len(resources)})

    except NotFoundError as e:
        return jsonify({'error': str(e)}), 404
    except ValueError as e:
        return jsonify({'error': str(e)}), 400
    except Exception as e:
        logger.error(f"Error ranking resources for concept_id={concept_id}: {str(e)}", exc_info=True)
        return jsonify({'error': f'Server error: {str(e)}'}), 500


@bp.route('/<int:resource_id>/interactions', methods=['POST'])
@login_required
def create_interaction(resource_id):
    """
    Record an interaction with a resource.

    Request Body:
        {
            "interaction_type": "complete",
            "rating": 5
        }

    Returns:
        200: {"success": true, "interaction_id": 3, "average_rating": 4.5, "rating_count": 2, ...}
        400: Missing or invalid fields
        404: Resource not found
        500: Server error
    """
    try:
        data = request.get_json(silent=True)

        if not data or 'interaction_type' not in data:
            return jsonify({'error': 'Missing required field: interaction_type'}), 400

        result = record_interaction(
            user_id=current_user.id,
            resource_id=resource_id,
            interaction_type=data['interaction_type'],
            rating=data.get('rating')
        )
        return jsonify({'success': True, **result})

    except NotFoundError as e:
        return jsonify({'error': str(e)}), 404
    except ValueError as e:
        return jsonify({'error': str(e)}), 400
    except Exception as e:
        db.session.rollback()
        logger.error(f"Error recording interaction on resource_id={resource_id}: {str(e)}", exc_info=True)
        return jsonify({'error': f'Server error: {str(e)}'}), 500
