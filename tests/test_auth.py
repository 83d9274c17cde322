"""
Integration tests for Google sign-in authentication flow.

Tests the complete authentication flow including:
- Credential verification and user creation
- Returning users
- Status and logout endpoints
"""

import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import unittest
from unittest.mock import patch
from app import create_app
from models import db
from models.user import User


class TestGoogleSignIn(unittest.TestCase):
    """Test Google Identity Services sign-in"""

    def setUp(self):
        """Set up test client and database"""
        self.app = create_app('testing')
        self.app.config['GOOGLE_CLIENT_ID'] = 'test-client-id'
        self.client = self.app.test_client()

        self.ctx = self.app.app_context()
        self.ctx.push()
        db.create_all()

    def tearDown(self):
        """Clean up test database"""
        db.session.remove()
        db.drop_all()
        self.ctx.pop()

    @patch('auth.oauth.id_token.verify_oauth2_token')
    def test_sign_in_creates_user(self, mock_verify):
        """A verified credential creates the user and logs them in"""
        mock_verify.return_value = {'sub': 'google-123', 'email': 'new@example.com', 'name': 'New User'}

        response = self.client.post('/auth/google', json={'credential': 'token'})

        self.assertEqual(response.status_code, 200)
        data = response.get_json()
        self.assertTrue(data['success'])
        self.assertEqual(data['user']['email'], 'new@example.com')

        user = User.query.filter_by(google_id='google-123').first()
        self.assertIsNotNone(user)
        self.assertEqual(user.name, 'New User')
        self.assertIsNotNone(user.last_active_at)

        status = self.client.get('/auth/status').get_json()
        self.assertTrue(status['authenticated'])
        self.assertEqual(status['user']['id'], user.id)

        # Verified against the configured client id
        self.assertEqual(mock_verify.call_args[0][2], 'test-client-id')

    @patch('auth.oauth.id_token.verify_oauth2_token')
    def test_sign_in_existing_user(self, mock_verify):
        """A returning user is not duplicated"""
        db.session.add(User(google_id='google-456', email='old@example.com', name='Old User'))
        db.session.commit()
        mock_verify.return_value = {'sub': 'google-456', 'email': 'old@example.com', 'name': 'Old User'}

        response = self.client.post('/auth/google', json={'credential': 'token'})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(User.query.filter_by(google_id='google-456').count(), 1)

    @patch('auth.oauth.id_token.verify_oauth2_token')
    def test_invalid_token(self, mock_verify):
        mock_verify.side_effect = ValueError('Token expired')

        response = self.client.post('/auth/google', json={'credential': 'bad-token'})

        self.assertEqual(response.status_code, 401)
        self.assertEqual(User.query.count(), 0)

    @patch('auth.oauth.id_token.verify_oauth2_token')
    def test_incomplete_token(self, mock_verify):
        mock_verify.return_value = {'sub': 'google-789'}

        response = self.client.post('/auth/google', json={'credential': 'token'})

        self.assertEqual(response.status_code, 400)

    def test_missing_credential(self):
        response = self.client.post('/auth/google', json={})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json()['error'], 'No credential provided')

    def test_status_anonymous(self):
        data = self.client.get('/auth/status').get_json()

        self.assertFalse(data['authenticated'])
        self.assertIsNone(data['user'])

    @patch('auth.oauth.id_token.verify_oauth2_token')
    def test_logout_clears_session(self, mock_verify):
        mock_verify.return_value = {'sub': 'google-999', 'email': 'bye@example.com', 'name': 'Bye'}
        self.client.post('/auth/google', json={'credential': 'token'})

        response = self.client.post('/auth/logout')

        self.assertEqual(response.status_code, 200)
        self.assertFalse(self.client.get('/auth/status').get_json()['authenticated'])

    def test_user_model_has_flask_login_methods(self):
        """Test that User model has required Flask-Login methods"""
        user = User(google_id='g', email='flask@example.com')

        self.assertTrue(hasattr(user, 'is_authenticated'))
        self.assertTrue(hasattr(user, 'is_active'))
        self.assertTrue(hasattr(user, 'get_id'))


class TestHealth(unittest.TestCase):
    """Health check endpoint"""

    def test_health(self):
        app = create_app('testing')
        with app.app_context():
            db.create_all()
            response = app.test_client().get('/health')
            self.assertEqual(response.status_code, 200)
            self.assertEqual(response.get_json()['status'], 'healthy')
            db.drop_all()
