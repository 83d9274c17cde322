"""
Resource Ranker - Orders candidate learning resources for a learner.

    composite = style_match * 0.3
              + quality_bonus                    (high 30, medium 15, low 0)
              + authority_score * 0.2
              + engagement_score * 0.2
              + (average_rating * 20) * 0.1
              + interaction_bonus                (viewed, not completed 5; saved 8)

style_match is the profile-weighted mean of the resource's per-modality fit,
or a neutral 50 without a profile. A missing metadata field contributes its
worst case (0). Resources are ordered on the unclamped composite; only the
reported relevance_score is clamped to [0, 100]. Sorting is stable: equal
composites keep discovery order.
"""

import logging
from typing import Collection, Iterable, List, Mapping, Optional

from services.exceptions import InvalidInputError
from services.learning_models import (
    LEARNING_MODALITIES,
    LearningStyleProfile,
    RankedResource,
    ResourceCandidate
)
from services.learning_policy import DEFAULT_POLICY, RankingPolicy
from services.math_utils import clamp

logger = logging.getLogger(__name__)


def validate_profile(profile: LearningStyleProfile) -> None:
    for modality in LEARNING_MODALITIES:
        weight = getattr(profile, modality)
        if weight < 0:
            raise InvalidInputError(f"Learning style weight '{modality}' cannot be negative, got: {weight}")


def style_match(
    resource: ResourceCandidate,
    profile: Optional[LearningStyleProfile],
    policy: Optional[RankingPolicy] = None
) -> float:
    """
    Weighted mean of the resource's learning-style fit under the profile.

    Returns the neutral score when no profile is supplied or all of its
    weights are zero.
    """
    policy = policy or DEFAULT_POLICY.ranking

    if profile is None:
        return policy.neutral_style_match
    validate_profile(profile)

    total_weight = profile.total_weight
    if total_weight == 0:
        return policy.neutral_style_match

    fit = resource.learning_style_fit
    weighted = 0.0
    for modality in LEARNING_MODALITIES:
        fit_score = getattr(fit, modality) if fit is not None else None
        weighted += (fit_score or 0.0) * getattr(profile, modality)

    return weighted / total_weight


def quality_bonus(resource: ResourceCandidate, policy: Optional[RankingPolicy] = None) -> float:
    policy = policy or DEFAULT_POLICY.ranking
    if not resource.quality:
        return 0.0
    return policy.quality_bonus.get(resource.quality.lower(), 0.0)


def interaction_bonus(
    interaction_types: Collection[str] = (),
    policy: Optional[RankingPolicy] = None
) -> float:
    """
    Boost from the learner's own history with a resource.

    A resource that was viewed but never completed is nudged up so the learner
    finishes it; a saved resource gets its own, larger boost. Both can apply.
    """
    policy = policy or DEFAULT_POLICY.ranking

    bonus = 0.0
    if 'view' in interaction_types and 'complete' not in interaction_types:
        bonus += policy.viewed_not_completed_bonus
    if 'save' in interaction_types:
        bonus += policy.saved_bonus
    return bonus


def score_resource(
    resource: ResourceCandidate,
    profile: Optional[LearningStyleProfile] = None,
    policy: Optional[RankingPolicy] = None,
    interaction_types: Collection[str] = ()
) -> RankedResource:
    """
    Compute the relevance score of a single resource.

    Args:
        resource: Candidate resource
        profile: Learner's style profile, or None for neutral style matching
        policy: Ranking weights
        interaction_types: Interaction types the learner has recorded on this resource

    Returns:
        RankedResource carrying the raw composite and the reported score
        clamped to [0, 100]
    """
    policy = policy or DEFAULT_POLICY.ranking

    match = style_match(resource, profile, policy)
    rating = resource.average_rating or 0.0

    composite = (
        match * policy.style_weight
        + quality_bonus(resource, policy)
        + (resource.authority_score or 0.0) * policy.authority_weight
        + (resource.engagement_score or 0.0) * policy.engagement_weight
        + (rating * policy.rating_scale) * policy.rating_weight
        + interaction_bonus(interaction_types, policy)
    )

    return RankedResource(
        resource=resource,
        relevance_score=round(clamp(composite, 0.0, 100.0), 2),
        # Six decimals, so composites that are equal on paper compare equal
        composite_score=round(composite, 6),
        style_match=round(match, 2)
    )


def rank_resources(
    candidates: Iterable[ResourceCandidate],
    profile: Optional[LearningStyleProfile] = None,
    limit: Optional[int] = None,
    policy: Optional[RankingPolicy] = None,
    interactions: Optional[Mapping[int, Collection[str]]] = None
) -> List[RankedResource]:
    """
    Rank candidate resources for a concept, best first.

    Args:
        candidates: Resources in discovery order
        profile: Learner's style profile, or None for neutral style matching
        limit: Maximum number of results (None for all)
        policy: Ranking weights
        interactions: Interaction types per resource id for this learner

    Returns:
        List[RankedResource] sorted by composite_score descending; ties keep
        their input order

    Raises:
        InvalidInputError: If the profile has negative weights or limit is negative

    Example:
        >>> ranked = rank_resources(candidates, profile=None)
        >>> [r.resource.id for r in ranked]
        [7, 3, 12]
    """
    policy = policy or DEFAULT_POLICY.ranking
    interactions = interactions or {}

    if limit is not None and limit < 0:
        raise InvalidInputError(f"limit cannot be negative, got: {limit}")
    if profile is not None:
        validate_profile(profile)

    scored = [
        score_resource(candidate, profile, policy, interactions.get(candidate.id, ()))
        for candidate in candidates
    ]
    # sorted() is stable, equal scores stay in discovery order
    ranked = sorted(scored, key=lambda item: item.composite_score, reverse=True)

    if limit is not None:
        ranked = ranked[:limit]

    logger.debug(
        f"Ranked {len(scored)} resources (profile={'yes' if profile else 'no'}, "
        f"with history={len(interactions)}), returning {len(ranked)}"
    )
    return ranked
