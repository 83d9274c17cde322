from models import db
from datetime import datetime
from flask_login import UserMixin
from sqlalchemy.orm import validates
import re


class User(UserMixin, db.Model):
    """User model - account identity; learning data hangs off it"""
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)

    # Google OAuth identifier
    google_id = db.Column(db.String, unique=True, nullable=False)

    email = db.Column(db.String, nullable=False, index=True)
    name = db.Column(db.String)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    last_active_at = db.Column(db.DateTime)

    # Relationships
    concepts = db.relationship('Concept', back_populates='user', lazy='dynamic')
    learning_progress = db.relationship('LearningProgress', back_populates='user', lazy='dynamic')
    study_sessions = db.relationship('StudySession', back_populates='user', lazy='dynamic')
    learning_style_profile = db.relationship('LearningStyleProfile', back_populates='user', uselist=False)

    @validates('email')
    def validate_email(self, key, email):
        if not email:
            raise ValueError('Email is required')
        pattern = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'
        if not re.match(pattern, email):
            raise ValueError(f'Invalid email format: {email}')
        return email

    def __repr__(self):
        return f'<User {self.email}>'
