from models import db
from datetime import datetime
from sqlalchemy.orm import validates


class LearningStyleProfile(db.Model):
    """LearningStyleProfile model - a user's relative preference per learning modality"""
    __tablename__ = 'learning_style_profiles'

    id = db.Column(db.Integer, primary_key=True)

    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, unique=True)

    # 0-100 weights; only their proportions matter for ranking
    visual = db.Column(db.Integer, nullable=False, default=50)
    auditory = db.Column(db.Integer, nullable=False, default=50)
    reading = db.Column(db.Integer, nullable=False, default=50)
    kinesthetic = db.Column(db.Integer, nullable=False, default=50)

    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    user = db.relationship('User', back_populates='learning_style_profile')

    @validates('visual', 'auditory', 'reading', 'kinesthetic')
    def validate_weight(self, key, value):
        if value is None or value < 0 or value > 100:
            raise ValueError(f'{key} must be between 0 and 100')
        return value

    def to_dict(self):
        return {
            'visual': self.visual,
            'auditory': self.auditory,
            'reading': self.reading,
            'kinesthetic': self.kinesthetic
        }

    def __repr__(self):
        return f'<LearningStyleProfile user_id={self.user_id}>'
