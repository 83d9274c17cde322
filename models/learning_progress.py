from models import db
from datetime import datetime, timezone


class LearningProgress(db.Model):
    """LearningProgress model - spaced repetition state for one user-concept pair"""
    __tablename__ = 'learning_progress'

    id = db.Column(db.Integer, primary_key=True)

    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    concept_id = db.Column(db.Integer, db.ForeignKey('concepts.id'), nullable=False)

    # 0-100
    comprehension = db.Column(db.Integer, nullable=False, default=0)
    practice = db.Column(db.Integer, nullable=False, default=0)

    ease_factor = db.Column(db.Float, nullable=False, default=2.5)
    interval_days = db.Column(db.Integer, nullable=False, default=1)
    review_count = db.Column(db.Integer, nullable=False, default=0)

    next_review_date = db.Column(db.Date)
    last_reviewed_at = db.Column(db.Date)

    # Seconds
    total_study_time = db.Column(db.Integer, nullable=False, default=0)

    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = db.Column(
        db.DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc)
    )

    # Relationships
    user = db.relationship('User', back_populates='learning_progress')
    concept = db.relationship('Concept', back_populates='learning_progress')

    # Unique constraint on (user_id, concept_id) and index on (user_id, next_review_date)
    __table_args__ = (
        db.UniqueConstraint('user_id', 'concept_id', name='uq_user_concept'),
        db.Index('idx_user_next_review', 'user_id', 'next_review_date'),
    )

    def to_dict(self):
        return {
            'concept_id': self.concept_id,
            'comprehension': self.comprehension,
            'practice': self.practice,
            'ease_factor': self.ease_factor,
            'interval': self.interval_days,
            'review_count': self.review_count,
            'next_review_date': self.next_review_date.isoformat() if self.next_review_date else None,
            'last_reviewed_at': self.last_reviewed_at.isoformat() if self.last_reviewed_at else None,
            'total_study_time': self.total_study_time
        }

    def __repr__(self):
        return (
            f'<LearningProgress user_id={self.user_id} concept_id={self.concept_id} '
            f'interval={self.interval_days}>'
        )
