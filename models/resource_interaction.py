from models import db
from datetime import datetime
from sqlalchemy.orm import validates

VALID_INTERACTION_TYPES = ['view', 'complete', 'save', 'rate']


class ResourceInteraction(db.Model):
    """ResourceInteraction model - a user's view/complete/save/rate event on a resource"""
    __tablename__ = 'resource_interactions'

    id = db.Column(db.Integer, primary_key=True)

    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    resource_id = db.Column(db.Integer, db.ForeignKey('resources.id'), nullable=False, index=True)

    # view, complete, save, rate
    interaction_type = db.Column(db.String(16), nullable=False)

    # 1-5, optional
    rating = db.Column(db.Integer)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    # Relationships
    resource = db.relationship('Resource', back_populates='interactions')

    @validates('interaction_type')
    def validate_interaction_type(self, key, value):
        if value not in VALID_INTERACTION_TYPES:
            raise ValueError(f'Invalid interaction_type: {value}. Must be one of: {VALID_INTERACTION_TYPES}')
        return value

    @validates('rating')
    def validate_rating(self, key, value):
        if value is not None and not 1 <= value <= 5:
            raise ValueError('rating must be between 1 and 5')
        return value

    def __repr__(self):
        return f'<ResourceInteraction user_id={self.user_id} resource_id={self.resource_id} type={self.interaction_type}>'
