from models import db
from datetime import datetime, timezone
from sqlalchemy.orm import validates

VALID_QUALITIES = ['high', 'medium', 'low']


class Resource(db.Model):
    """Resource model - an external learning resource with quality and style-fit metadata"""
    __tablename__ = 'resources'

    id = db.Column(db.Integer, primary_key=True)

    title = db.Column(db.String, nullable=False)
    url = db.Column(db.String, nullable=False)
    description = db.Column(db.Text)

    # video, article, interactive, course, book
    type = db.Column(db.String(32))

    # high, medium, low
    quality = db.Column(db.String(16))

    # 0-100, nullable: discovery does not always provide them
    authority_score = db.Column(db.Integer)
    engagement_score = db.Column(db.Integer)

    # Learning style fit, 0-100 per modality
    visual_fit = db.Column(db.Integer)
    auditory_fit = db.Column(db.Integer)
    reading_fit = db.Column(db.Integer)
    kinesthetic_fit = db.Column(db.Integer)

    estimated_time_minutes = db.Column(db.Integer)

    # 0-5 average of user ratings
    average_rating = db.Column(db.Float, default=0.0)
    rating_count = db.Column(db.Integer, default=0)

    date_added = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))

    # Relationships
    concept_links = db.relationship('ConceptResource', back_populates='resource', lazy='dynamic')
    interactions = db.relationship('ResourceInteraction', back_populates='resource', lazy='dynamic')

    @validates('quality')
    def validate_quality(self, key, quality):
        if quality is not None and quality not in VALID_QUALITIES:
            raise ValueError(f'Invalid quality: {quality}. Must be one of: {VALID_QUALITIES}')
        return quality

    def __repr__(self):
        return f'<Resource {self.title} ({self.type})>'


class ConceptResource(db.Model):
    """ConceptResource model - links a resource to a concept; id order is discovery order"""
    __tablename__ = 'concept_resources'

    id = db.Column(db.Integer, primary_key=True)

    concept_id = db.Column(db.Integer, db.ForeignKey('concepts.id'), nullable=False, index=True)
    resource_id = db.Column(db.Integer, db.ForeignKey('resources.id'), nullable=False)

    discovered_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))

    # Relationships
    concept = db.relationship('Concept', back_populates='resource_links')
    resource = db.relationship('Resource', back_populates='concept_links')

    __table_args__ = (
        db.UniqueConstraint('concept_id', 'resource_id', name='uq_concept_resource'),
    )

    def __repr__(self):
        return f'<ConceptResource concept_id={self.concept_id} resource_id={self.resource_id}>'
