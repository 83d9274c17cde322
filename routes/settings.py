from flask import Blueprint, jsonify, request
from flask_login import login_required, current_user
from models import db
from services.learning_models import LEARNING_MODALITIES
from services.learning_style_service import get_profile_row, update_learning_style
import logging

logger = logging.getLogger(__name__)

bp = Blueprint('settings', __name__, url_prefix='/settings')

DEFAULT_STYLE_WEIGHT = 50


@bp.route('/learning-style', methods=['GET'])
@login_required
def get_learning_style():
    """
    Get the user's learning-style weights.

    Users who never set a profile get the neutral defaults and
    'is_default': true; resource ranking then uses a neutral style match.
    """
    try:
        row = get_profile_row(current_user.id)

        if row is None:
            return jsonify({
                'success': True,
                'is_default': True,
                'learning_style': {modality: DEFAULT_STYLE_WEIGHT for modality in LEARNING_MODALITIES}
            }), 200

        return jsonify({
            'success': True,
            'is_default': False,
            'learning_style': row.to_dict()
        }), 200

    except Exception as e:
        logger.exception(f'Error loading learning style for user {current_user.email}: {str(e)}')
        return jsonify({
            'success': False,
            'error': 'Failed to load learning style. Please try again.'
        }), 500


@bp.route('/learning-style', methods=['PUT'])
@login_required
def put_learning_style():
    """
    Update the user's learning-style weights.

    Request Body (any subset):
        {
            "visual": int (0-100),
            "auditory": int (0-100),
            "reading": int (0-100),
            "kinesthetic": int (0-100)
        }

    Returns:
        JSON response with success status and the stored weights
    """
    try:
        data = request.get_json(silent=True)

        if not data or not isinstance(data, dict):
            return jsonify({
                'success': False,
                'error': 'Missing request body'
            }), 400

        row = update_learning_style(current_user.id, data)

        return jsonify({
            'success': True,
            'learning_style': row.to_dict()
        }), 200

    except ValueError as e:
        return jsonify({
            'success': False,
            'error': str(e)
        }), 400
    except Exception as e:
        db.session.rollback()
        logger.exception(f'Error updating learning style for user {current_user.email}: {str(e)}')
        return jsonify({
            'success': False,
            'error': 'Failed to update learning style. Please try again.'
        }), 500
