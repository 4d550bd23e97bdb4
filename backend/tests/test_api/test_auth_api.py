"""
API tests for registration, login and session endpoints
"""
from unittest.mock import patch

from jingo.core.exceptions import ConflictError, UnauthorizedError

REGISTRATION = {
    'email': 'pat@example.com',
    'password': 'Bounce2025',
    'name': 'Pat Owner',
}


class TestAuthApi:

    @patch('jingo.api.auth.AuthService')
    def test_register_created(self, mock_service_cls, client):
        mock_service_cls.return_value.register.return_value = {'user': {'id': 1}, 'access_token': 'tok'}

        response = client.post('/api/v1/auth/register', json=REGISTRATION)

        assert response.status_code == 201
        assert response.json()['access_token'] == 'tok'

    @patch('jingo.api.auth.AuthService')
    def test_register_duplicate_email(self, mock_service_cls, client):
        mock_service_cls.return_value.register.side_effect = ConflictError("Email already registered")

        response = client.post('/api/v1/auth/register', json=REGISTRATION)

        assert response.status_code == 409
        assert response.json()['detail'] == "Email already registered"

    def test_register_weak_password(self, client):
        response = client.post('/api/v1/auth/register', json=dict(REGISTRATION, password='weak'))

        assert response.status_code == 422

    @patch('jingo.api.auth.AuthService')
    def test_login_bad_credentials(self, mock_service_cls, client):
        mock_service_cls.return_value.login.side_effect = UnauthorizedError("Invalid email or password")

        response = client.post('/api/v1/auth/login', json={'email': 'pat@example.com', 'password': 'nope'})

        assert response.status_code == 401

    @patch('jingo.api.auth.AuthService')
    def test_check_email(self, mock_service_cls, client):
        mock_service_cls.return_value.is_email_available.return_value = False

        response = client.get('/api/v1/auth/check-email', params={'email': 'pat@example.com'})

        assert response.json() == {'available': False}

    def test_me_requires_token(self, client):
        assert client.get('/api/v1/auth/me').status_code == 401

    def test_me_returns_token_user(self, client, as_customer):
        response = client.get('/api/v1/auth/me')

        assert response.status_code == 200
        assert response.json()['data']['id'] == 42
        assert response.json()['data']['role'] == 'CUSTOMER'
