from flask import Blueprint, current_app, request, jsonify
from flask_login import login_user, logout_user, current_user
from google.oauth2 import id_token
from google.auth.transport import requests
import logging

from auth.utils import get_or_create_user, serialize_user

# Set up logging
logger = logging.getLogger(__name__)

bp = Blueprint('auth', __name__, url_prefix='/auth')


@bp.route('/google', methods=['POST'])
def google_signin():
    """
    Handle Google Identity Services (GIS) sign-in.
    Receives a credential token from the frontend and verifies it.
    """
    try:
        data = request.get_json(silent=True) or {}
        credential = data.get('credential')

        if not credential:
            return jsonify({
                'success': False,
                'error': 'No credential provided'
            }), 400

        client_id = current_app.config.get('GOOGLE_CLIENT_ID')
        if not client_id:
            logger.error('GOOGLE_CLIENT_ID is not configured, rejecting sign-in')
            return jsonify({
                'success': False,
                'error': 'Google sign-in is not configured'
            }), 500

        # Verify the credential token with Google
        try:
            idinfo = id_token.verify_oauth2_token(
                credential,
                requests.Request(),
                client_id
            )
        except ValueError as e:
            # Invalid token
            logger.error(f'Invalid Google token: {str(e)}')
            return jsonify({
                'success': False,
                'error': 'Invalid credential token'
            }), 401

        google_id = idinfo.get('sub')
        email = idinfo.get('email')
        name = idinfo.get('name', '')

        if not google_id or not email:
            logger.error('Incomplete user info from Google token')
            return jsonify({
                'success': False,
                'error': 'Incomplete user information'
            }), 400

        user = get_or_create_user(google_id, email, name)

        if not user:
            logger.error(f'Failed to create/retrieve user for google_id: {google_id}')
            return jsonify({
                'success': False,
                'error': 'Failed to create user account'
            }), 500

        # Log in the user with Flask-Login
        login_user(user, remember=True)
        logger.info(f'User {email} logged in successfully via GIS')

        return jsonify({
            'success': True,
            'user': serialize_user(user)
        }), 200

    except Exception as e:
        logger.exception(f'Exception during Google sign-in: {str(e)}')
        return jsonify({
            'success': False,
            'error': 'An unexpected error occurred'
        }), 500


@bp.route('/status', methods=['GET'])
def auth_status():
    """
    Get current authentication status.
    Used by the frontend to check whether a session exists.
    """
    if current_user.is_authenticated:
        return jsonify({
            'success': True,
            'authenticated': True,
            'user': serialize_user(current_user)
        }), 200

    return jsonify({
        'success': True,
        'authenticated': False,
        'user': None
    }), 200


@bp.route('/logout', methods=['POST'])
def logout():
    """Log out the current user"""
    user_email = current_user.email if current_user.is_authenticated else 'anonymous'

    logout_user()

    logger.info(f'User {user_email} logged out successfully')

    return jsonify({
        'success': True,
        'message': 'Successfully logged out'
    }), 200
