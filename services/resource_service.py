"""
Resource Service - Recommends and tracks external learning resources.

Loads a concept's candidate resources in discovery order, ranks them with the
resource ranker against the user's learning-style profile, and records user
interactions (views, completions, saves and ratings).
"""

import logging
from typing import Dict, List, Optional, Set

from sqlalchemy.exc import SQLAlchemyError

from models import db
from models.concept import Concept
from models.resource import ConceptResource, Resource
from models.resource_interaction import ResourceInteraction, VALID_INTERACTION_TYPES
from services.exceptions import InvalidInputError, NotFoundError, PersistenceError
from services.learning_models import LearningStyleFit, ResourceCandidate
from services.learning_policy import get_learning_policy
from services.learning_style_service import load_learning_style_profile, nudge_learning_style
from services.resource_ranker import rank_resources

logger = logging.getLogger(__name__)

# Modalities reinforced when a user completes and rates a resource of this type highly
TYPE_MODALITIES = {
    'video': ['visual', 'auditory'],
    'article': ['reading'],
    'book': ['reading'],
    'interactive': ['kinesthetic'],
}
HIGH_RATING = 4
STYLE_NUDGE = 10


def to_resource_candidate(resource: Resource) -> ResourceCandidate:
    """Convert a Resource row into the ranker's input record"""
    fit_values = (
        resource.visual_fit,
        resource.auditory_fit,
        resource.reading_fit,
        resource.kinesthetic_fit,
    )
    fit = None
    if any(value is not None for value in fit_values):
        fit = LearningStyleFit(
            visual=resource.visual_fit,
            auditory=resource.auditory_fit,
            reading=resource.reading_fit,
            kinesthetic=resource.kinesthetic_fit
        )

    return ResourceCandidate(
        id=resource.id,
        title=resource.title,
        url=resource.url,
        resource_type=resource.type,
        quality=resource.quality,
        authority_score=resource.authority_score,
        engagement_score=resource.engagement_score,
        average_rating=resource.average_rating,
        learning_style_fit=fit,
        estimated_time_minutes=resource.estimated_time_minutes
    )


def load_candidate_resources(concept_id: int) -> List[ResourceCandidate]:
    """
    Load the resources linked to a concept, oldest discovery first.

    Raises:
        PersistenceError: If the query fails
    """
    try:
        rows = Resource.query.join(
            ConceptResource, ConceptResource.resource_id == Resource.id
        ).filter(
            ConceptResource.concept_id == concept_id
        ).order_by(
            ConceptResource.id.asc()
        ).all()
    except SQLAlchemyError as e:
        logger.error(f"Database error loading resources for concept_id={concept_id}: {str(e)}", exc_info=True)
        raise PersistenceError(f"Failed to load resources: {str(e)}") from e

    return [to_resource_candidate(row) for row in rows]


def load_interaction_types(user_id: int, resource_ids: List[int]) -> Dict[int, Set[str]]:
    """
    Interaction types a user has recorded, per resource.

    Returns:
        dict: {resource_id: {'view', 'save', ...}}; resources without history are absent

    Raises:
        PersistenceError: If the query fails
    """
    if not resource_ids:
        return {}

    try:
        rows = db.session.query(
            ResourceInteraction.resource_id,
            ResourceInteraction.interaction_type
        ).filter(
            ResourceInteraction.user_id == user_id,
            ResourceInteraction.resource_id.in_(resource_ids)
        ).distinct().all()
    except SQLAlchemyError as e:
        logger.error(f"Database error loading interactions for user_id={user_id}: {str(e)}", exc_info=True)
        raise PersistenceError(f"Failed to load resource interactions: {str(e)}") from e

    interactions: Dict[int, Set[str]] = {}
    for resource_id, interaction_type in rows:
        interactions.setdefault(resource_id, set()).add(interaction_type)
    return interactions


def get_ranked_resources(user_id: int, concept_id: int, limit: Optional[int] = None) -> List[dict]:
    """
    Rank a concept's resources for a user.

    The user's own history counts: resources viewed but not completed and
    resources they saved are boosted.

    Args:
        user_id: The ID of the user
        concept_id: The ID of the concept
        limit: Maximum number of resources (None returns all)

    Returns:
        List of resource dicts with 'relevance_score' and 'style_match', best first

    Raises:
        NotFoundError: If the concept does not exist
        PersistenceError: If a query fails

    Example:
        >>> get_ranked_resources(user_id=1, concept_id=42, limit=3)
        [{'id': 7, 'title': '...', 'relevance_score': 71.5, 'style_match': 82.0, ...}, ...]
    """
    try:
        concept = db.session.get(Concept, concept_id)
    except SQLAlchemyError as e:
        logger.error(f"Database error retrieving concept {concept_id}: {str(e)}", exc_info=True)
        raise PersistenceError(f"Failed to retrieve concept: {str(e)}") from e
    if concept is None:
        raise NotFoundError(f"Concept {concept_id} not found")

    candidates = load_candidate_resources(concept_id)
    profile = load_learning_style_profile(user_id)
    interactions = load_interaction_types(user_id, [candidate.id for candidate in candidates])
    ranked = rank_resources(
        candidates,
        profile=profile,
        limit=limit,
        policy=get_learning_policy().ranking,
        interactions=interactions
    )

    logger.info(
        f"Ranked {len(candidates)} resources for user_id={user_id}, concept_id={concept_id}, "
        f"returning {len(ranked)} (profile={'yes' if profile else 'none'})"
    )

    results = []
    for item in ranked:
        data = item.resource.model_dump(mode='json')
        data['relevance_score'] = item.relevance_score
        data['style_match'] = item.style_match
        results.append(data)
    return results


def record_interaction(
    user_id: int,
    resource_id: int,
    interaction_type: str,
    rating: Optional[int] = None
) -> dict:
    """
    Record a user interaction with a resource.

    A rating updates the resource's running average. Completing a resource
    with a rating of 4 or more strengthens the matching learning-style
    weights (+10, capped at 100).

    Args:
        user_id: The ID of the user
        resource_id: The ID of the resource
        interaction_type: 'view', 'complete', 'save' or 'rate'
        rating: Optional 1-5 rating

    Returns:
        dict: {'interaction_id', 'resource_id', 'average_rating', 'rating_count'}

    Raises:
        InvalidInputError: If the type or rating is invalid
        NotFoundError: If the resource does not exist
        PersistenceError: If the database write fails
    """
    if interaction_type not in VALID_INTERACTION_TYPES:
        raise InvalidInputError(
            f"Invalid interaction_type: '{interaction_type}'. Must be one of: {VALID_INTERACTION_TYPES}"
        )
    if rating is not None and (isinstance(rating, bool) or not isinstance(rating, int) or not 1 <= rating <= 5):
        raise InvalidInputError(f"rating must be an integer between 1 and 5, got: {rating!r}")
    if interaction_type == 'rate' and rating is None:
        raise InvalidInputError("A 'rate' interaction requires a rating")

    try:
        resource = db.session.get(Resource, resource_id)
        if resource is None:
            raise NotFoundError(f"Resource {resource_id} not found")

        interaction = ResourceInteraction(
            user_id=user_id,
            resource_id=resource_id,
            interaction_type=interaction_type,
            rating=rating
        )
        db.session.add(interaction)

        if rating is not None:
            count = resource.rating_count or 0
            average = resource.average_rating or 0.0
            resource.rating_count = count + 1
            resource.average_rating = round((average * count + rating) / (count + 1), 2)

        if interaction_type == 'complete' and rating is not None and rating >= HIGH_RATING:
            nudge_learning_style(user_id, TYPE_MODALITIES.get(resource.type, []), STYLE_NUDGE)

        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(
            f"Failed to record interaction for user_id={user_id}, resource_id={resource_id}: {str(e)}",
            exc_info=True
        )
        raise PersistenceError(f"Failed to record resource interaction: {str(e)}") from e

    logger.info(
        f"Recorded '{interaction_type}' on resource_id={resource_id} by user_id={user_id} "
        f"(rating={rating}, average_rating={resource.average_rating})"
    )

    return {
        'interaction_id': interaction.id,
        'resource_id': resource_id,
        'average_rating': resource.average_rating,
        'rating_count': resource.rating_count
    }
