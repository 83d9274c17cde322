"""
Unit tests for learning progress service.

Tests loading and saving progress, the quiz completion workflow that scores
a session and reschedules the concept, and the per user-concept lock.
"""

import gc
import sys
import threading
import os
import pytest
from datetime import date
from unittest.mock import patch

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy.exc import OperationalError

from app import create_app
from config import TestingConfig, config
from models import db
from models.user import User
from models.concept import Concept
from models.learning_progress import LearningProgress
from models.study_session import StudySession
from services.exceptions import (
    EmptyQuizAttemptError,
    InvalidInputError,
    NotFoundError,
    PersistenceError
)
from services.learning_models import LearningProgressState
from services.learning_progress_service import (
    _progress_locks,
    build_quiz_attempt,
    complete_quiz_session,
    get_all_progress,
    get_progress_lock,
    load_progress,
    save_progress
)

TODAY = date(2025, 1, 1)


def answers(correct, total, difficulty='basic'):
    return [
        {'difficulty': difficulty, 'is_correct': index < correct, 'question_id': index + 1}
        for index in range(total)
    ]


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
def test_user(app_context):
    """Create a test user"""
    user = User(google_id='test_user_123', email='test@example.com', name='Test User')
    db.session.add(user)
    db.session.commit()
    return user


@pytest.fixture
def test_concept(app_context, test_user):
    """Create a test concept"""
    concept = Concept(name='Binary search', description='Halving a sorted range', user_id=test_user.id)
    db.session.add(concept)
    db.session.commit()
    return concept


class TestLoadAndSaveProgress:
    """Tests for load_progress and save_progress"""

    def test_load_returns_none_when_never_reviewed(self, test_user, test_concept):
        assert load_progress(test_user.id, test_concept.id) is None

    def test_save_creates_row(self, test_user, test_concept):
        state = LearningProgressState(
            comprehension=40, practice=20, ease_factor=2.36, interval=2, review_count=2,
            next_review_date=date(2025, 1, 3), last_reviewed_at=TODAY, total_study_time=90
        )
        save_progress(test_user.id, test_concept.id, state)

        assert LearningProgress.query.count() == 1
        assert load_progress(test_user.id, test_concept.id) == state

    def test_save_updates_existing_row(self, test_user, test_concept):
        save_progress(test_user.id, test_concept.id, LearningProgressState(comprehension=10))
        save_progress(test_user.id, test_concept.id, LearningProgressState(comprehension=30))

        assert LearningProgress.query.count() == 1
        assert load_progress(test_user.id, test_concept.id).comprehension == 30

    def test_save_failure_raises_persistence_error(self, test_user, test_concept):
        with patch.object(db.session, 'commit', side_effect=OperationalError('INSERT', {}, Exception('disk full'))):
            with pytest.raises(PersistenceError):
                save_progress(test_user.id, test_concept.id, LearningProgressState())

        assert LearningProgress.query.count() == 0

    def test_get_all_progress_orders_by_next_review(self, test_user, app_context):
        first = Concept(name='Heaps', user_id=test_user.id)
        second = Concept(name='Tries', user_id=test_user.id)
        db.session.add_all([first, second])
        db.session.commit()

        save_progress(test_user.id, first.id, LearningProgressState(next_review_date=date(2025, 2, 1)))
        save_progress(test_user.id, second.id, LearningProgressState(next_review_date=date(2025, 1, 5)))

        rows = get_all_progress(test_user.id)
        assert [row.concept_id for row in rows] == [second.id, first.id]

    def test_get_all_progress_rejects_bad_user_id(self, app_context):
        with pytest.raises(InvalidInputError):
            get_all_progress(0)


class TestCompleteQuizSession:
    """Tests for complete_quiz_session - the main quiz completion workflow"""

    def test_new_concept_end_to_end(self, test_user, test_concept):
        result = complete_quiz_session(
            test_user.id, test_concept.id, answers(8, 10), self_rating=4,
            elapsed_seconds=300, today=TODAY
        )

        assert result['quality'] == 4
        assert result['correct_count'] == 8
        assert result['total_questions'] == 10
        assert result['lapsed'] is False
        assert result['next_review_date'] == date(2025, 1, 4)

        progress = result['progress']
        assert progress['interval'] == 3
        assert progress['ease_factor'] == pytest.approx(2.5)
        assert progress['review_count'] == 1
        assert progress['comprehension'] == 24
        assert progress['practice'] == 10
        assert progress['total_study_time'] == 300
        assert progress['next_review_date'] == '2025-01-04'

    def test_session_summary_is_stored(self, test_user, test_concept):
        complete_quiz_session(test_user.id, test_concept.id, answers(8, 10), 4, 300, today=TODAY)

        session = StudySession.query.one()
        assert session.user_id == test_user.id
        assert session.concept_id == test_concept.id
        assert session.correct_count == 8
        assert session.total_questions == 10
        assert session.self_rating == 4
        assert session.quality == 4
        assert session.elapsed_seconds == 300
        assert session.resulting_interval == 3

    def test_second_session_uses_stored_progress(self, test_user, test_concept):
        complete_quiz_session(test_user.id, test_concept.id, answers(8, 10), 4, today=TODAY)
        result = complete_quiz_session(test_user.id, test_concept.id, answers(8, 10), 4, today=date(2025, 1, 4))

        assert result['progress']['interval'] == 8
        assert result['progress']['comprehension'] == 41
        assert result['progress']['review_count'] == 2
        assert LearningProgress.query.count() == 1
        assert StudySession.query.count() == 2

    def test_failed_session_resets_interval(self, test_user, test_concept):
        complete_quiz_session(test_user.id, test_concept.id, answers(10, 10), 5, today=TODAY)
        result = complete_quiz_session(test_user.id, test_concept.id, answers(1, 10), 1, today=TODAY)

        assert result['lapsed'] is True
        assert result['progress']['interval'] == 1
        assert result['progress']['ease_factor'] == pytest.approx(2.6)

    def test_empty_attempt_rejected_and_nothing_saved(self, test_user, test_concept):
        with pytest.raises(EmptyQuizAttemptError):
            complete_quiz_session(test_user.id, test_concept.id, [], 3, today=TODAY)

        assert LearningProgress.query.count() == 0
        assert StudySession.query.count() == 0

    def test_self_rating_out_of_range(self, test_user, test_concept):
        with pytest.raises(InvalidInputError):
            complete_quiz_session(test_user.id, test_concept.id, answers(5, 10), 6, today=TODAY)

    def test_malformed_answers(self, test_user, test_concept):
        with pytest.raises(InvalidInputError):
            complete_quiz_session(
                test_user.id, test_concept.id, [{'difficulty': 'expert', 'is_correct': True}], 3, today=TODAY
            )

    def test_negative_elapsed_time(self, test_user, test_concept):
        with pytest.raises(InvalidInputError):
            complete_quiz_session(test_user.id, test_concept.id, answers(5, 10), 3, -1, today=TODAY)

    def test_unknown_concept(self, test_user, app_context):
        with pytest.raises(NotFoundError):
            complete_quiz_session(test_user.id, 999, answers(5, 10), 3, today=TODAY)

    def test_invalid_user_id(self, test_concept):
        with pytest.raises(InvalidInputError):
            complete_quiz_session(-1, test_concept.id, answers(5, 10), 3, today=TODAY)

    def test_persistence_failure_rolls_back(self, test_user, test_concept):
        with patch.object(db.session, 'commit', side_effect=OperationalError('INSERT', {}, Exception('locked'))):
            with pytest.raises(PersistenceError):
                complete_quiz_session(test_user.id, test_concept.id, answers(8, 10), 4, today=TODAY)

        assert LearningProgress.query.count() == 0
        assert StudySession.query.count() == 0

    def test_malformed_stored_progress_is_rejected(self, test_user, test_concept):
        db.session.add(LearningProgress(
            user_id=test_user.id, concept_id=test_concept.id, interval_days=0, ease_factor=2.5
        ))
        db.session.commit()

        with pytest.raises(InvalidInputError):
            complete_quiz_session(test_user.id, test_concept.id, answers(8, 10), 4, today=TODAY)


class TestBuildQuizAttempt:
    """Tests for build_quiz_attempt"""

    def test_builds_from_dicts(self):
        attempt = build_quiz_attempt(answers(3, 4), 4, 120)
        assert attempt.total_questions == 4
        assert attempt.correct_count == 3
        assert attempt.elapsed_seconds == 120

    def test_missing_elapsed_defaults_to_zero(self):
        assert build_quiz_attempt(answers(1, 1), 3, None).elapsed_seconds == 0

    def test_answers_must_be_a_list(self):
        with pytest.raises(InvalidInputError):
            build_quiz_attempt('correct', 3)

    def test_non_numeric_self_rating(self):
        with pytest.raises(InvalidInputError):
            build_quiz_attempt(answers(1, 1), 'great')


class TestProgressLock:
    """Updates for one user-concept pair share a lock"""

    def test_same_pair_same_lock(self):
        assert get_progress_lock(1, 2) is get_progress_lock(1, 2)

    def test_different_pairs_different_locks(self):
        assert get_progress_lock(1, 2) is not get_progress_lock(1, 3)
        assert get_progress_lock(1, 2) is not get_progress_lock(2, 2)

    def test_unused_lock_is_dropped(self):
        lock = get_progress_lock(7, 8)
        assert (7, 8) in _progress_locks

        del lock
        gc.collect()

        assert (7, 8) not in _progress_locks


@pytest.fixture
def file_backed_app(tmp_path):
    """App on a SQLite file, so each thread gets its own connection"""
    class FileTestingConfig(TestingConfig):
        SQLALCHEMY_DATABASE_URI = f"sqlite:///{tmp_path / 'progress.db'}"

    with patch.dict(config, {'file_testing': FileTestingConfig}):
        app = create_app('file_testing')

    with app.app_context():
        db.create_all()
        user = User(google_id='concurrent_user', email='concurrent@example.com')
        db.session.add(user)
        db.session.flush()
        concept = Concept(name='Hash tables', user_id=user.id)
        db.session.add(concept)
        db.session.commit()
        ids = (user.id, concept.id)
        db.session.remove()

    yield app, ids

    with app.app_context():
        db.drop_all()
        db.engine.dispose()


class TestConcurrentSessions:
    """Two sessions finishing at the same time for one user-concept pair"""

    def test_both_sessions_are_applied(self, file_backed_app):
        app, (user_id, concept_id) = file_backed_app
        start = threading.Barrier(2)
        results, errors = [], []

        def finish_quiz():
            with app.app_context():
                start.wait()
                try:
                    results.append(complete_quiz_session(user_id, concept_id, answers(8, 10), 4, 60, today=TODAY))
                except Exception as e:
                    errors.append(e)

        workers = [threading.Thread(target=finish_quiz) for _ in range(2)]
        for worker in workers:
            worker.start()
        for worker in workers:
            worker.join(timeout=10)

        assert errors == []
        assert len(results) == 2

        with app.app_context():
            progress = LearningProgress.query.filter_by(user_id=user_id, concept_id=concept_id).one()
            assert progress.review_count == 2
            assert progress.interval_days == 8
            assert progress.total_study_time == 120
            assert StudySession.query.count() == 2
