from models import db
from models.user import User
from datetime import datetime
from sqlalchemy.exc import SQLAlchemyError
import logging

logger = logging.getLogger(__name__)


def get_or_create_user(google_id, email, name):
    """
    Get or create a user from a verified Google sign-in.

    Args:
        google_id: Google account identifier ('sub' claim)
        email: User's email from Google
        name: User's name from Google

    Returns:
        User object or None if the database operation fails
    """
    try:
        # Check if user already exists
        user = User.query.filter_by(google_id=google_id).first()

        if user:
            # Update last active timestamp
            user.last_active_at = datetime.utcnow()
            db.session.commit()
            return user

        user = User(
            google_id=google_id,
            email=email,
            name=name,
            last_active_at=datetime.utcnow()
        )

        db.session.add(user)
        db.session.commit()

        logger.info(f'Created new user: {email}')
        return user

    except (SQLAlchemyError, ValueError) as e:
        db.session.rollback()
        logger.error(f'Failed to create/update user {email}: {str(e)}', exc_info=True)
        return None


def serialize_user(user):
    return {
        'id': user.id,
        'email': user.email,
        'name': user.name
    }
