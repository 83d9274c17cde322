from models import db
from datetime import datetime, timezone
from sqlalchemy.orm import validates

VALID_DIFFICULTIES = ['basic', 'medium', 'advanced']


class Question(db.Model):
    """Question model - a quiz question for a concept at a difficulty tier"""
    __tablename__ = 'questions'

    id = db.Column(db.Integer, primary_key=True)

    concept_id = db.Column(db.Integer, db.ForeignKey('concepts.id'), nullable=False, index=True)

    text = db.Column(db.Text, nullable=False)

    # e.g. ["Option A", "Option B", "Option C", "Option D"]
    options = db.Column(db.JSON)

    # Index into options for multiple choice
    correct_answer = db.Column(db.Integer)

    explanation = db.Column(db.Text)

    # basic, medium, advanced
    difficulty = db.Column(db.String(16), nullable=False, default='basic')

    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))

    # Relationships
    concept = db.relationship('Concept', back_populates='questions')

    @validates('difficulty')
    def validate_difficulty(self, key, difficulty):
        if difficulty not in VALID_DIFFICULTIES:
            raise ValueError(f'Invalid difficulty: {difficulty}. Must be one of: {VALID_DIFFICULTIES}')
        return difficulty

    def __repr__(self):
        return f'<Question {self.id} concept_id={self.concept_id} difficulty={self.difficulty}>'
