"""
Model validation and constraint tests.
"""

import sys
import os
import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy.exc import IntegrityError

from app import create_app
from models import db
from models.user import User
from models.concept import Concept
from models.question import Question
from models.resource import Resource
from models.resource_interaction import ResourceInteraction
from models.learning_progress import LearningProgress
from models.learning_style_profile import LearningStyleProfile


@pytest.fixture(scope='function')
def app_context():
    """Create a fresh app context and database for each test"""
    app = create_app('testing')

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def user(app_context):
    user = User(google_id='model_user', email='models@example.com')
    db.session.add(user)
    db.session.commit()
    return user


def test_user_email_validation(app_context):
    with pytest.raises(ValueError):
        User(google_id='x', email='not-an-email')


def test_concept_name_is_stripped(app_context):
    assert Concept(name='  Closures  ').name == 'Closures'


def test_concept_name_cannot_be_blank(app_context):
    with pytest.raises(ValueError):
        Concept(name='   ')


def test_question_difficulty_validation(app_context):
    with pytest.raises(ValueError):
        Question(concept_id=1, text='?', difficulty='impossible')


def test_resource_quality_validation(app_context):
    assert Resource(title='t', url='u', quality=None).quality is None
    with pytest.raises(ValueError):
        Resource(title='t', url='u', quality='excellent')


def test_interaction_rating_validation(app_context):
    with pytest.raises(ValueError):
        ResourceInteraction(user_id=1, resource_id=1, interaction_type='rate', rating=0)


def test_learning_style_weight_validation(app_context):
    with pytest.raises(ValueError):
        LearningStyleProfile(user_id=1, visual=101)


def test_progress_defaults(user):
    concept = Concept(name='Iterators', user_id=user.id)
    db.session.add(concept)
    db.session.flush()
    progress = LearningProgress(user_id=user.id, concept_id=concept.id)
    db.session.add(progress)
    db.session.commit()

    assert progress.interval_days == 1
    assert progress.ease_factor == 2.5
    assert progress.review_count == 0
    assert progress.to_dict()['next_review_date'] is None


def test_progress_unique_per_user_concept(user):
    concept = Concept(name='Generators', user_id=user.id)
    db.session.add(concept)
    db.session.flush()
    db.session.add(LearningProgress(user_id=user.id, concept_id=concept.id))
    db.session.add(LearningProgress(user_id=user.id, concept_id=concept.id))

    with pytest.raises(IntegrityError):
        db.session.commit()
    db.session.rollback()
