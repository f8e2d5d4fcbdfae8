"""
Test configuration and fixtures.

Store and app fixtures run once per backend (memory and SQLite through
Flask-SQLAlchemy) so both implementations are held to the same behavior.
"""
import pytest
from werkzeug.security import generate_password_hash

from skillmetrix import create_app
from skillmetrix.extensions import db
from skillmetrix.storage import USER

BACKENDS = ['memory', 'database']
PASSWORD = 'secret123'


def build_app(backend):
    app = create_app('testing', {'STORAGE_BACKEND': backend})
    if backend == 'database':
        with app.app_context():
            db.create_all()
    return app


def teardown_app(app):
    if app.config['STORAGE_BACKEND'] == 'database':
        with app.app_context():
            db.session.remove()
            db.drop_all()


def insert_user(store, email, **fields):
    fields.setdefault('password_hash', generate_password_hash(PASSWORD))
    return store.insert(USER, dict(fields, email=email))


@pytest.fixture(params=BACKENDS)
def store(request):
    """An entity store with an app context pushed for the whole test."""
    app = build_app(request.param)
    with app.app_context():
        yield app.extensions['entity_store']
        if request.param == 'database':
            db.session.rollback()
    teardown_app(app)


@pytest.fixture
def database_store():
    """The SQLite-backed store alone, for behavior only the database backend has."""
    app = build_app('database')
    with app.app_context():
        yield app.extensions['entity_store']
        db.session.rollback()
    teardown_app(app)


@pytest.fixture(params=BACKENDS)
def app(request):
    app = build_app(request.param)
    yield app
    teardown_app(app)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(app):
    """Create a user directly in the store and return its id."""
    def _make_user(email, **fields):
        with app.app_context():
            return insert_user(app.extensions['entity_store'], email, **fields).id
    return _make_user


@pytest.fixture
def login(client):
    def _login(email, password=PASSWORD):
        response = client.post('/api/login', json={'email': email, 'password': password})
        assert response.status_code == 200, response.get_json()
        return response.get_json()
    return _login


@pytest.fixture
def admin(make_user, login):
    """Create and log in an admin; returns the admin's id."""
    user_id = make_user('boss@example.com', account_role='admin')
    login('boss@example.com')
    return user_id
