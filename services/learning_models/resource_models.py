"""
Resource Pydantic Models

Candidate learning resources and the learner's style profile used to rank
them. Resource metadata is frequently incomplete (discovery pipelines fill
what they can), so every scoring field is optional.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

LEARNING_MODALITIES = ('visual', 'auditory', 'reading', 'kinesthetic')


class LearningStyleFit(BaseModel):
    """Per-modality suitability of a resource, each 0-100"""
    model_config = ConfigDict(frozen=True)

    visual: Optional[float] = None
    auditory: Optional[float] = None
    reading: Optional[float] = None
    kinesthetic: Optional[float] = None


class LearningStyleProfile(BaseModel):
    """
    Relative modality preferences of a learner.

    Weights are non-negative and need not sum to any particular total; only
    their proportions matter.
    """
    model_config = ConfigDict(frozen=True)

    visual: float = 0.0
    auditory: float = 0.0
    reading: float = 0.0
    kinesthetic: float = 0.0

    @property
    def total_weight(self) -> float:
        return self.visual + self.auditory + self.reading + self.kinesthetic


class ResourceCandidate(BaseModel):
    """
    Static resource metadata as loaded from the resource store.

    Example:
    {
        "id": 7,
        "title": "Binary search visualized",
        "resource_type": "video",
        "quality": "high",
        "authority_score": 80,
        "engagement_score": 65,
        "average_rating": 4.5,
        "learning_style_fit": {"visual": 90, "auditory": 70, "reading": 20, "kinesthetic": 10},
        "estimated_time_minutes": 12
    }
    """
    model_config = ConfigDict(frozen=True)

    id: Optional[int] = None
    title: str = ''
    url: Optional[str] = None
    resource_type: Optional[str] = None
    quality: Optional[str] = Field(default=None, description="'high', 'medium' or 'low'")
    authority_score: Optional[float] = None
    engagement_score: Optional[float] = None
    average_rating: Optional[float] = Field(default=None, description="Average user rating, 0-5")
    learning_style_fit: Optional[LearningStyleFit] = None
    estimated_time_minutes: Optional[int] = None


class RankedResource(BaseModel):
    """A candidate with the relevance score computed for this request"""
    model_config = ConfigDict(frozen=True)

    resource: ResourceCandidate
    relevance_score: float = Field(description="Composite score clamped to 0-100 and rounded to two decimals")
    composite_score: float = Field(description="Unclamped composite score, the ranking key")
    style_match: float = Field(description="Learning-style match before weighting, 0-100")
