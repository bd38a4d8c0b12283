import pytest

from app import create_app
from backend.models import drop_db, get_db, Group, GroupMember, User


TEST_CONFIG = {
    'TESTING': True,
    'SECRET_KEY': 'test-secret',
    'DATABASE_URL': 'sqlite:///:memory:',
    'SESSION_TYPE': None,
    'CACHE_TYPE': 'SimpleCache',
    'SEED_DEMO_DATA': True,
    'AUTO_LOGIN_EMAIL': None,
    'LOG_LEVEL': 'WARNING',
}

# Seeded by seed_demo_data()
ADMIN_EMAIL = 'admin@church.org'
LEADER_EMAIL = 'jane@church.org'
MEMBER_EMAIL = 'bob@church.org'
WORSHIP_TEAM_ID = 1


@pytest.fixture
def app():
    """Fresh app on an in-memory database seeded with the demo church"""
    app = create_app(TEST_CONFIG)
    yield app
    drop_db()


@pytest.fixture
def client(app):
    with app.test_client() as client:
        yield client


@pytest.fixture
def sign_in(client):
    """Sign the test client in as the user with ``email``; returns the user"""
    def _sign_in(email):
        response = client.post('/api/session', json={'email': email})
        assert response.status_code == 200
        return response.get_json()
    return _sign_in


@pytest.fixture
def make_user(app):
    def _make_user(name, email, role='member', branch_id=1):
        with get_db() as db:
            user = User(name=name, email=email, role=role, branch_id=branch_id)
            db.add(user)
            db.flush()
            return user.to_dict()
    return _make_user


@pytest.fixture
def make_group(app):
    def _make_group(name, branch_id=1):
        with get_db() as db:
            group = Group(name=name, branch_id=branch_id, type='Ministry')
            db.add(group)
            db.flush()
            return group.id
    return _make_group


@pytest.fixture
def add_member(app):
    def _add_member(user_id, group_id, role_in_group=None):
        with get_db() as db:
            db.add(GroupMember(user_id=user_id, group_id=group_id, role_in_group=role_in_group))
    return _add_member


def _pushed_events(socket_client):
    """Payloads of the Socket.IO ``message`` events received since the last call"""
    events = []
    for packet in socket_client.get_received():
        if packet['name'] != 'message':
            continue
        args = packet['args']
        events.append(args[0] if isinstance(args, list) else args)
    return events


@pytest.fixture
def pushed_events():
    return _pushed_events
