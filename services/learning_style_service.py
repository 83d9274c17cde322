"""Learning Style Service - Reads and updates a user's learning-style profile"""
import logging
from typing import Dict, Iterable, Optional

from sqlalchemy.exc import SQLAlchemyError

from models import db
from models.learning_style_profile import LearningStyleProfile as LearningStyleProfileModel
from services.exceptions import InvalidInputError, PersistenceError
from services.learning_models import LEARNING_MODALITIES, LearningStyleProfile

logger = logging.getLogger(__name__)

MAX_WEIGHT = 100


def get_profile_row(user_id: int) -> Optional[LearningStyleProfileModel]:
    try:
        return LearningStyleProfileModel.query.filter_by(user_id=user_id).first()
    except SQLAlchemyError as e:
        logger.error(f"Database error loading learning style for user_id={user_id}: {str(e)}", exc_info=True)
        raise PersistenceError(f"Failed to load learning style profile: {str(e)}") from e


def load_learning_style_profile(user_id: int) -> Optional[LearningStyleProfile]:
    """
    Load a user's learning-style profile.

    Returns:
        LearningStyleProfile, or None if the user never set one (the ranker
        then uses a neutral style match)
    """
    row = get_profile_row(user_id)
    if row is None:
        return None
    return LearningStyleProfile(
        visual=row.visual,
        auditory=row.auditory,
        reading=row.reading,
        kinesthetic=row.kinesthetic
    )


def _validate_weights(weights: Dict[str, int]) -> Dict[str, int]:
    unknown = set(weights) - set(LEARNING_MODALITIES)
    if unknown:
        raise InvalidInputError(
            f"Unknown learning style keys: {sorted(unknown)}. Valid keys: {list(LEARNING_MODALITIES)}"
        )
    cleaned = {}
    for key, value in weights.items():
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidInputError(f"{key} must be an integer between 0 and {MAX_WEIGHT}, got: {value!r}")
        if not 0 <= value <= MAX_WEIGHT:
            raise InvalidInputError(f"{key} must be between 0 and {MAX_WEIGHT}, got: {value}")
        cleaned[key] = value
    return cleaned


def update_learning_style(user_id: int, weights: Dict[str, int]) -> LearningStyleProfileModel:
    """
    Create or partially update a user's learning-style weights.

    Args:
        user_id: The ID of the user
        weights: Subset of {'visual', 'auditory', 'reading', 'kinesthetic'} -> 0-100

    Returns:
        The stored LearningStyleProfile row

    Raises:
        InvalidInputError: If a key is unknown or a value is out of range
        PersistenceError: If the database write fails
    """
    cleaned = _validate_weights(weights)

    try:
        row = get_profile_row(user_id)
        if row is None:
            row = LearningStyleProfileModel(user_id=user_id)
            db.session.add(row)
        for key, value in cleaned.items():
            setattr(row, key, value)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Failed to update learning style for user_id={user_id}: {str(e)}", exc_info=True)
        raise PersistenceError(f"Failed to update learning style profile: {str(e)}") from e

    logger.info(f"Updated learning style for user_id={user_id}: {cleaned}")
    return row


def nudge_learning_style(user_id: int, modalities: Iterable[str], amount: int = 10) -> Optional[LearningStyleProfileModel]:
    """
    Increase the weight of the given modalities, capped at 100.

    Used when a user finishes and rates a resource highly. The caller commits.

    Returns:
        The staged row, or None when there is nothing to change
    """
    modalities = [modality for modality in modalities if modality in LEARNING_MODALITIES]
    if not modalities:
        return None

    row = get_profile_row(user_id)
    if row is None:
        row = LearningStyleProfileModel(user_id=user_id)
        db.session.add(row)

    for modality in modalities:
        # Column defaults only apply on flush; a new row still reads None here
        current = getattr(row, modality)
        if current is None:
            current = 50
        setattr(row, modality, min(MAX_WEIGHT, current + amount))

    logger.debug(f"Nudged learning style for user_id={user_id}: {modalities} +{amount}")
    return row
