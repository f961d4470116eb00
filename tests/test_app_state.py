"""
Tests for per-request store selection and identity handling.
"""

import json

import pytest

from app import create_app
from exceptions import ConfigurationError
from services.local_storage import SESSIONS_KEY, LocalStorage
from utils.auth_utils import hash_proxy_token


class TestModeSelection:
    def test_guest_without_identity(self, client):
        status = client.get('/api/status').get_json()

        assert status['mode'] == 'guest'
        assert status['authenticated'] is False
        assert status['store']['kind'] == 'local'

    def test_authenticated_with_identity(self, client, auth_headers):
        status = client.get('/api/status', headers=auth_headers).get_json()

        assert status['mode'] == 'authenticated'
        assert status['store'] == {'kind': 'remote', 'backend': 'sqlite'}

    def test_overlong_identity_rejected(self, client, app):
        response = client.get('/api/status', headers={app.config['AUTH_USER_HEADER']: 'x' * 65})

        assert response.status_code == 401
        assert response.get_json()['code'] == 'E100'

    def test_state_is_per_request(self, client, auth_headers):
        client.post('/api/charging/add', json={'start_percent': 20, 'end_percent': 80}, headers=auth_headers)

        assert len(client.get('/api/charging/history', headers=auth_headers).get_json()) == 1
        assert client.get('/api/charging/history').get_json() == []


class TestGuestDataAfterSignIn:
    def test_guest_data_unchanged(self, client, auth_headers, local_storage_path):
        client.post('/api/charging/add', json={'start_percent': 20, 'end_percent': 80, 'cost': 500})
        client.put('/api/settings', json={'battery_capacity': 40})
        with open(local_storage_path, 'r', encoding='utf-8') as f:
            before = f.read()

        # Sign in and use the app
        assert client.get('/api/charging/history', headers=auth_headers).get_json() == []
        client.post('/api/charging/add', json={'start_percent': 10, 'end_percent': 90}, headers=auth_headers)
        client.put('/api/settings', json={'battery_capacity': 80}, headers=auth_headers)

        with open(local_storage_path, 'r', encoding='utf-8') as f:
            assert f.read() == before

        guest_sessions = json.loads(LocalStorage(local_storage_path).get_item(SESSIONS_KEY))
        assert [s['cost'] for s in guest_sessions] == [500]


class TestProxyToken:
    @pytest.fixture
    def secured_app(self, tmp_path):
        flask_app = create_app({
            'TESTING': True,
            'DATABASE_URL': 'sqlite:///:memory:',
            'LOCAL_STORAGE_PATH': str(tmp_path / 'local_storage.json'),
            'RATELIMIT_ENABLED': False,
            'AUTH_PROXY_TOKEN_HASH': hash_proxy_token('proxy-secret'),
        })
        yield flask_app

    def test_valid_token(self, secured_app):
        client = secured_app.test_client()
        response = client.get('/api/status', headers={
            'X-Auth-User-Id': 'user-1111',
            'X-Auth-Proxy-Token': 'proxy-secret',
        })

        assert response.status_code == 200
        assert response.get_json()['mode'] == 'authenticated'

    def test_missing_token(self, secured_app):
        client = secured_app.test_client()
        response = client.get('/api/status', headers={'X-Auth-User-Id': 'user-1111'})

        assert response.status_code == 401

    def test_wrong_token(self, secured_app):
        client = secured_app.test_client()
        response = client.get('/api/status', headers={
            'X-Auth-User-Id': 'user-1111',
            'X-Auth-Proxy-Token': 'guess',
        })

        assert response.status_code == 401
        assert response.get_json()['error'] == 'Invalid proxy token'

    def test_guest_needs_no_token(self, secured_app):
        client = secured_app.test_client()
        assert client.get('/api/status').get_json()['mode'] == 'guest'


class TestStartupConfig:
    @pytest.mark.parametrize('key', ['DATABASE_URL', 'LOCAL_STORAGE_PATH', 'AUTH_USER_HEADER'])
    def test_missing_required_setting(self, tmp_path, key):
        overrides = {
            'TESTING': True,
            'DATABASE_URL': 'sqlite:///:memory:',
            'LOCAL_STORAGE_PATH': str(tmp_path / 'local_storage.json'),
            key: '',
        }

        with pytest.raises(ConfigurationError) as exc_info:
            create_app(overrides)

        assert exc_info.value.config_key == key

    def test_unsupported_default_currency(self, tmp_path):
        with pytest.raises(ConfigurationError) as exc_info:
            create_app({
                'TESTING': True,
                'DATABASE_URL': 'sqlite:///:memory:',
                'LOCAL_STORAGE_PATH': str(tmp_path / 'local_storage.json'),
                'DEFAULT_CURRENCY': 'XYZ',
            })

        assert exc_info.value.config_key == 'DEFAULT_CURRENCY'
