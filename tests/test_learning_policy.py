"""
Tests for the learning policy and its config overrides.
"""

import sys
import os
import pytest
from pydantic import ValidationError

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app import create_app
from services.learning_policy import DEFAULT_POLICY, LearningPolicy, get_learning_policy


class TestDefaults:
    """Documented defaults"""

    def test_quality_weights(self):
        assert DEFAULT_POLICY.quality.performance_weight == 0.7
        assert DEFAULT_POLICY.quality.self_rating_weight == 0.3

    def test_scheduler_defaults(self):
        scheduler = DEFAULT_POLICY.scheduler
        assert scheduler.initial_interval == 1
        assert scheduler.initial_ease_factor == 2.5
        assert scheduler.min_ease_factor == 1.3
        assert scheduler.pass_threshold == 3
        assert scheduler.practice_increment == 10
        assert scheduler.max_interval_days == 365

    def test_ranking_defaults(self):
        ranking = DEFAULT_POLICY.ranking
        assert ranking.quality_bonus == {'high': 30.0, 'medium': 15.0, 'low': 0.0}
        assert ranking.neutral_style_match == 50.0
        assert ranking.viewed_not_completed_bonus == 5.0
        assert ranking.saved_bonus == 8.0

    def test_policy_is_immutable(self):
        with pytest.raises(ValidationError):
            DEFAULT_POLICY.scheduler.practice_increment = 20


class TestFromConfig:
    """LearningPolicy.from_config()"""

    def test_empty_config_keeps_defaults(self):
        assert LearningPolicy.from_config({}) == DEFAULT_POLICY

    def test_none_values_keep_defaults(self):
        assert LearningPolicy.from_config({'PRACTICE_INCREMENT': None}) == DEFAULT_POLICY

    def test_overrides(self):
        policy = LearningPolicy.from_config({
            'PRACTICE_INCREMENT': 15,
            'MAX_INTERVAL_DAYS': 180,
            'QUALITY_PERFORMANCE_WEIGHT': 0.8,
            'QUALITY_SELF_RATING_WEIGHT': 0.2,
        })
        assert policy.scheduler.practice_increment == 15
        assert policy.scheduler.max_interval_days == 180
        assert policy.quality.performance_weight == 0.8
        assert policy.quality.self_rating_weight == 0.2

    def test_retention_weight_sets_complement(self):
        policy = LearningPolicy.from_config({'COMPREHENSION_RETENTION_WEIGHT': 0.6})
        assert policy.scheduler.comprehension_retention_weight == 0.6
        assert policy.scheduler.session_score_weight == pytest.approx(0.4)


class TestGetLearningPolicy:
    """get_learning_policy() inside and outside an app context"""

    def test_outside_app_context(self):
        assert get_learning_policy() is DEFAULT_POLICY

    def test_testing_app_uses_defaults(self):
        app = create_app('testing')
        with app.app_context():
            assert get_learning_policy() == DEFAULT_POLICY

    def test_app_config_override(self):
        app = create_app('testing')
        app.config['MAX_INTERVAL_DAYS'] = 30
        with app.app_context():
            assert get_learning_policy().scheduler.max_interval_days == 30
