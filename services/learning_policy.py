"""
Learning Policy - Tunable constants for the adaptive learning engine.

Every numeric weight used by the quality scorer, the scheduler, the question
selector and the resource ranker is defined here with its default. The
Flask config can override a subset of them through environment variables
(see config.py and get_learning_policy()).
"""

import logging
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)


class QualityPolicy(BaseModel):
    """Weights for turning a quiz attempt into a 1-5 quality value"""
    model_config = ConfigDict(frozen=True)

    performance_weight: float = Field(
        default=0.7,
        description="Share of the quality driven by the correct-answer ratio"
    )
    self_rating_weight: float = Field(
        default=0.3,
        description="Share of the quality driven by the user's self-rating"
    )
    min_quality: int = 1
    max_quality: int = 5
    min_self_rating: int = 1
    max_self_rating: int = 5


class SchedulerPolicy(BaseModel):
    """SM-2 family parameters for the spaced repetition scheduler"""
    model_config = ConfigDict(frozen=True)

    initial_interval: int = 1
    initial_ease_factor: float = 2.5
    min_ease_factor: float = 1.3
    pass_threshold: int = Field(
        default=3,
        description="Qualities below this value count as a failed review"
    )
    comprehension_retention_weight: float = Field(
        default=0.7,
        description="Weight of the previous comprehension in the blend"
    )
    session_score_weight: float = Field(
        default=0.3,
        description="Weight of this session's percent-correct in the blend"
    )
    practice_increment: int = 10
    max_interval_days: Optional[int] = Field(
        default=365,
        description="Upper bound for the review interval; None disables the cap"
    )


class SelectorPolicy(BaseModel):
    """Comprehension thresholds for choosing the question difficulty tier"""
    model_config = ConfigDict(frozen=True)

    medium_threshold: int = 50
    advanced_threshold: int = 80
    fundamentals_review_count: int = Field(
        default=2,
        description="Reviews after which a low comprehension triggers a fundamentals focus"
    )
    fundamentals_comprehension: int = 60


class RankingPolicy(BaseModel):
    """Weights for the composite resource relevance score"""
    model_config = ConfigDict(frozen=True)

    style_weight: float = 0.3
    authority_weight: float = 0.2
    engagement_weight: float = 0.2
    rating_weight: float = 0.1
    rating_scale: float = Field(
        default=20.0,
        description="Multiplier bringing a 0-5 average rating onto a 0-100 scale"
    )
    neutral_style_match: float = 50.0
    viewed_not_completed_bonus: float = Field(
        default=5.0,
        description="Boost for a resource the learner opened but never finished"
    )
    saved_bonus: float = Field(
        default=8.0,
        description="Boost for a resource the learner saved"
    )
    quality_bonus: Mapping[str, float] = Field(
        default_factory=lambda: {'high': 30.0, 'medium': 15.0, 'low': 0.0}
    )


class LearningPolicy(BaseModel):
    """All policy knobs of the learning engine in one place"""
    model_config = ConfigDict(frozen=True)

    quality: QualityPolicy = Field(default_factory=QualityPolicy)
    scheduler: SchedulerPolicy = Field(default_factory=SchedulerPolicy)
    selector: SelectorPolicy = Field(default_factory=SelectorPolicy)
    ranking: RankingPolicy = Field(default_factory=RankingPolicy)

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> 'LearningPolicy':
        """
        Build a policy from a Flask config mapping.

        Only keys that are present and not None override the defaults.

        Args:
            config: Mapping such as app.config

        Returns:
            LearningPolicy with overrides applied
        """
        quality_overrides = {}
        if config.get('QUALITY_PERFORMANCE_WEIGHT') is not None:
            quality_overrides['performance_weight'] = float(config['QUALITY_PERFORMANCE_WEIGHT'])
        if config.get('QUALITY_SELF_RATING_WEIGHT') is not None:
            quality_overrides['self_rating_weight'] = float(config['QUALITY_SELF_RATING_WEIGHT'])

        scheduler_overrides = {}
        if config.get('PRACTICE_INCREMENT') is not None:
            scheduler_overrides['practice_increment'] = int(config['PRACTICE_INCREMENT'])
        if config.get('MAX_INTERVAL_DAYS') is not None:
            scheduler_overrides['max_interval_days'] = int(config['MAX_INTERVAL_DAYS'])
        if config.get('COMPREHENSION_RETENTION_WEIGHT') is not None:
            retention = float(config['COMPREHENSION_RETENTION_WEIGHT'])
            scheduler_overrides['comprehension_retention_weight'] = retention
            scheduler_overrides['session_score_weight'] = round(1.0 - retention, 6)

        policy = cls(
            quality=QualityPolicy(**quality_overrides),
            scheduler=SchedulerPolicy(**scheduler_overrides),
        )
        if quality_overrides or scheduler_overrides:
            logger.debug(
                f"Learning policy overrides: quality={quality_overrides}, "
                f"scheduler={scheduler_overrides}"
            )
        return policy


DEFAULT_POLICY = LearningPolicy()


def get_learning_policy() -> LearningPolicy:
    """
    Return the policy for the active Flask app, or the defaults outside one.
    """
    from flask import current_app, has_app_context

    if not has_app_context():
        return DEFAULT_POLICY
    return LearningPolicy.from_config(current_app.config)
