from models import db
from datetime import datetime, timezone
from sqlalchemy.orm import validates


class Concept(db.Model):
    """Concept model - a unit of knowledge extracted from the user's documents"""
    __tablename__ = 'concepts'

    id = db.Column(db.Integer, primary_key=True)

    name = db.Column(db.String, nullable=False)
    description = db.Column(db.Text)

    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), index=True)

    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))

    # Relationships
    user = db.relationship('User', back_populates='concepts')
    questions = db.relationship('Question', back_populates='concept', lazy='dynamic')
    learning_progress = db.relationship('LearningProgress', back_populates='concept', lazy='dynamic')
    resource_links = db.relationship('ConceptResource', back_populates='concept', lazy='dynamic')

    @validates('name')
    def validate_name(self, key, name):
        if not name or not name.strip():
            raise ValueError('Concept name cannot be empty or whitespace')
        return name.strip()

    def __repr__(self):
        return f'<Concept {self.name}>'
