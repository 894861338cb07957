"""
Integration tests for admin login and bearer-token checks.
"""

from datetime import datetime, timedelta, timezone

import jwt


class TestLogin:

    def test_login_returns_token(self, client, admin_user):
        email = admin_user.email

        response = client.post('/api/admin/login', json={'email': email, 'password': 'password123'})

        assert response.status_code == 200
        data = response.get_json()
        assert data['admin']['email'] == email
        assert data['token']

        me = client.get('/api/admin/me', headers={'Authorization': f"Bearer {data['token']}"})
        assert me.status_code == 200
        assert me.get_json()['admin']['email'] == email

    def test_login_is_case_insensitive_on_email(self, client, admin_user):
        response = client.post('/api/admin/login', json={
            'email': admin_user.email.upper(), 'password': 'password123'
        })
        assert response.status_code == 200

    def test_wrong_password(self, client, admin_user):
        response = client.post('/api/admin/login', json={'email': admin_user.email, 'password': 'nope'})

        assert response.status_code == 400
        assert response.get_json()['message'] == 'Invalid credentials'

    def test_unknown_email(self, client, session):
        response = client.post('/api/admin/login', json={'email': 'ghost@test.com', 'password': 'password123'})

        assert response.status_code == 400
        assert response.get_json()['message'] == 'Invalid credentials'

    def test_missing_fields(self, client):
        response = client.post('/api/admin/login', json={})
        assert response.status_code == 400
        assert response.get_json()['message'] == 'Email and password are required'


class TestBearerToken:

    def test_missing_header(self, client):
        response = client.get('/api/admin/me')
        assert response.status_code == 401

    def test_wrong_scheme(self, client, admin_headers):
        token = admin_headers['Authorization'].split(' ', 1)[1]
        response = client.get('/api/admin/me', headers={'Authorization': f'Token {token}'})
        assert response.status_code == 401

    def test_expired_token(self, app, client, admin_user):
        token = jwt.encode(
            {'sub': str(admin_user.id), 'exp': datetime.now(timezone.utc) - timedelta(minutes=5)},
            app.config['JWT_SECRET'],
            algorithm='HS256'
        )

        response = client.get('/api/admin/me', headers={'Authorization': f'Bearer {token}'})

        assert response.status_code == 401
        assert response.get_json()['message'] == 'Session expired, please log in again'

    def test_tampered_token(self, client, admin_user):
        token = jwt.encode(
            {'sub': str(admin_user.id), 'exp': datetime.now(timezone.utc) + timedelta(minutes=5)},
            'some-other-secret',
            algorithm='HS256'
        )

        response = client.get('/api/admin/me', headers={'Authorization': f'Bearer {token}'})

        assert response.status_code == 401
        assert response.get_json()['message'] == 'Invalid token'

    def test_token_for_deleted_admin(self, client, session, admin_user, admin_headers):
        session.delete(admin_user)
        session.commit()

        response = client.get('/api/admin/me', headers=admin_headers)

        assert response.status_code == 401


class TestLoginPayloadTypes:

    def test_numeric_password(self, client, admin_user):
        response = client.post('/api/admin/login', json={'email': admin_user.email, 'password': 12345})

        assert response.status_code == 400
        assert response.get_json()['message'] == 'Invalid credentials'

    def test_numeric_email(self, client):
        response = client.post('/api/admin/login', json={'email': 5, 'password': 'password123'})

        assert response.status_code == 400
        assert response.get_json()['message'] == 'Invalid credentials'
