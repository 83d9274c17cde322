from models import db
from datetime import datetime


class StudySession(db.Model):
    """StudySession model - summary of one completed quiz session for a concept"""
    __tablename__ = 'study_sessions'

    id = db.Column(db.Integer, primary_key=True)

    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    concept_id = db.Column(db.Integer, db.ForeignKey('concepts.id'), nullable=False)

    total_questions = db.Column(db.Integer, nullable=False)
    correct_count = db.Column(db.Integer, nullable=False)
    self_rating = db.Column(db.Integer, nullable=False)

    # 1-5 quality fed to the scheduler
    quality = db.Column(db.Integer, nullable=False)

    elapsed_seconds = db.Column(db.Integer, nullable=False, default=0)

    # Interval chosen by the scheduler after this session
    resulting_interval = db.Column(db.Integer)

    completed_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, index=True)

    # Relationships
    user = db.relationship('User', back_populates='study_sessions')

    def __repr__(self):
        return f'<StudySession user_id={self.user_id} concept_id={self.concept_id} quality={self.quality}>'
