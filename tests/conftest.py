"""
Pytest fixtures for EVC Track tests.
"""

import os
import sys

import pytest

# Add tracker to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'tracker'))

os.environ.setdefault('SECRET_KEY', 'test-secret-key-for-testing-only')

from app import create_app  # noqa: E402
from database import EXTENSION_KEY  # noqa: E402
from services.local_storage import LocalDataStore, LocalStorage  # noqa: E402
from services.remote_storage import RemoteDataStore  # noqa: E402

TEST_USER_ID = 'user-1111'
OTHER_USER_ID = 'user-2222'


@pytest.fixture
def local_storage_path(tmp_path):
    return str(tmp_path / 'local_storage.json')


@pytest.fixture
def app(local_storage_path):
    """Create application for testing with an in-memory remote store."""
    flask_app = create_app({
        'TESTING': True,
        'DATABASE_URL': 'sqlite:///:memory:',
        'LOCAL_STORAGE_PATH': local_storage_path,
        'RATELIMIT_ENABLED': False,
        'AUTH_PROXY_TOKEN_HASH': None,
    })

    yield flask_app

    engine = flask_app.extensions[EXTENSION_KEY]['engine']
    flask_app.extensions[EXTENSION_KEY]['session_factory'].remove()
    engine.dispose()


@pytest.fixture
def client(app):
    """Create test client (guest unless auth headers are sent)."""
    return app.test_client()


@pytest.fixture
def auth_headers(app):
    """Headers the auth proxy sends for a signed-in user."""
    return {app.config['AUTH_USER_HEADER']: TEST_USER_ID}


@pytest.fixture
def other_auth_headers(app):
    return {app.config['AUTH_USER_HEADER']: OTHER_USER_ID}


@pytest.fixture
def db_session(app):
    """Provide a remote store database session for tests."""
    session_factory = app.extensions[EXTENSION_KEY]['session_factory']
    session = session_factory()
    yield session
    session.rollback()
    session_factory.remove()


@pytest.fixture
def local_storage(local_storage_path):
    return LocalStorage(local_storage_path)


@pytest.fixture
def local_store(local_storage):
    """Guest-mode store on a temporary file."""
    return LocalDataStore(local_storage)


@pytest.fixture
def remote_store(db_session):
    """Authenticated-mode store for TEST_USER_ID."""
    return RemoteDataStore(db_session, TEST_USER_ID)


@pytest.fixture
def other_remote_store(db_session):
    return RemoteDataStore(db_session, OTHER_USER_ID)


@pytest.fixture(params=['local', 'remote'])
def store(request):
    """Each test using this runs once per store implementation."""
    if request.param == 'local':
        return request.getfixturevalue('local_store')
    return request.getfixturevalue('remote_store')
