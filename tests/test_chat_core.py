from datetime import datetime, timedelta, timezone

import pytest

from backend.chat import (
    MessageIngress, MessageStore, MembershipAuthority, StoreError, ValidationError, read_history, serialize_message,
)
from backend.models import get_db, Message
from backend.websockets import BroadcastDispatcher, ChannelRegistry

from test_registry import FakeConnection

WORSHIP_TEAM_ID = 1
LEADER_ID = 2
MEMBER_ID = 3


class RecordingDispatcher:
    """Records broadcasts and checks the message is already stored when each one runs"""

    def __init__(self, store):
        self.store = store
        self.calls = []

    def broadcast(self, group_id, event):
        stored = self.store.select_by_id(event['message']['id'])
        self.calls.append((group_id, event, stored))
        return 0


class ExplodingDispatcher:
    def broadcast(self, group_id, event):
        raise RuntimeError('socket layer down')


@pytest.fixture
def store(app):
    return MessageStore()


@pytest.fixture
def membership(app):
    return MembershipAuthority()


@pytest.fixture
def recorder(store):
    return RecordingDispatcher(store)


@pytest.fixture
def ingress(store, recorder):
    return MessageIngress(store, recorder)


def message_count():
    with get_db() as db:
        return db.query(Message).count()


class TestMessageStore:

    def test_insert_assigns_id_and_timestamp(self, store):
        inserted = store.insert(WORSHIP_TEAM_ID, LEADER_ID, 'See you Sunday')
        assert inserted['id'] > 1
        assert inserted['timestamp'] is not None

    def test_select_by_id_includes_sender_name(self, store):
        inserted = store.insert(WORSHIP_TEAM_ID, MEMBER_ID, 'On my way')
        message = store.select_by_id(inserted['id'])
        assert message['sender_name'] == 'Bob Wilson'
        assert message['group_id'] == WORSHIP_TEAM_ID
        assert message['content'] == 'On my way'

    def test_timestamps_are_timezone_aware_utc(self, store):
        assert Message.__table__.c.timestamp.type.timezone is True
        inserted = store.insert(WORSHIP_TEAM_ID, LEADER_ID, 'See you Sunday')
        assert store.select_by_id(inserted['id'])['timestamp'].endswith('+00:00')

    def test_serialized_timestamp_is_converted_to_utc(self):
        local = timezone(timedelta(hours=2))
        message = Message(id=7, group_id=WORSHIP_TEAM_ID, sender_id=LEADER_ID, content='Hi',
                          timestamp=datetime(2026, 2, 22, 11, 30, tzinfo=local))
        assert serialize_message(message, 'Jane Smith')['timestamp'] == '2026-02-22T09:30:00+00:00'

    def test_select_by_id_unknown(self, store):
        assert store.select_by_id(9999) is None

    def test_unknown_group_is_rejected(self, store):
        with pytest.raises(StoreError):
            store.insert(9999, LEADER_ID, 'Hello?')

    def test_unknown_sender_is_rejected(self, store):
        with pytest.raises(StoreError):
            store.insert(WORSHIP_TEAM_ID, 9999, 'Hello?')

    def test_select_by_group_is_oldest_first(self, store):
        ids = [store.insert(WORSHIP_TEAM_ID, LEADER_ID, f'note {n}')['id'] for n in range(3)]
        history = store.select_by_group(WORSHIP_TEAM_ID)
        # Seeded welcome message comes first
        assert [m['id'] for m in history] == [1] + ids


class TestMessageIngress:

    def test_post_returns_id_and_broadcasts_stored_row(self, ingress, recorder, store):
        message_id = ingress.post_message(WORSHIP_TEAM_ID, LEADER_ID, 'Hello')

        assert len(recorder.calls) == 1
        group_id, event, stored_at_broadcast = recorder.calls[0]
        assert group_id == WORSHIP_TEAM_ID
        assert event['type'] == 'NEW_MESSAGE'
        assert event['message']['id'] == message_id
        assert event['message']['sender_name'] == 'Jane Smith'
        # Persisted before the broadcast ran
        assert stored_at_broadcast == event['message']

    def test_pushed_message_matches_history(self, ingress, recorder, store):
        message_id = ingress.post_message(WORSHIP_TEAM_ID, LEADER_ID, 'Rehearsal moved to 7')
        pushed = recorder.calls[0][1]['message']
        history = {m['id']: m for m in store.select_by_group(WORSHIP_TEAM_ID)}
        assert history[message_id] == pushed

    def test_content_is_trimmed(self, ingress, store):
        message_id = ingress.post_message(WORSHIP_TEAM_ID, LEADER_ID, '  Amen  ')
        assert store.select_by_id(message_id)['content'] == 'Amen'

    def test_string_ids_are_accepted(self, ingress, store):
        message_id = ingress.post_message(str(WORSHIP_TEAM_ID), str(LEADER_ID), 'From a form post')
        assert store.select_by_id(message_id)['group_id'] == WORSHIP_TEAM_ID

    @pytest.mark.parametrize('group_id, sender_id, content', [
        (WORSHIP_TEAM_ID, LEADER_ID, ''),
        (WORSHIP_TEAM_ID, LEADER_ID, '   '),
        (WORSHIP_TEAM_ID, LEADER_ID, None),
        (None, LEADER_ID, 'Hello'),
        (WORSHIP_TEAM_ID, None, 'Hello'),
        ('abc', LEADER_ID, 'Hello'),
        (0, LEADER_ID, 'Hello'),
        (1.9, LEADER_ID, 'Hello'),
        ('1.0', LEADER_ID, 'Hello'),
        (WORSHIP_TEAM_ID, float(LEADER_ID), 'Hello'),
        (True, LEADER_ID, 'Hello'),
        ('-1', LEADER_ID, 'Hello'),
    ])
    def test_validation_failure_writes_nothing(self, ingress, recorder, group_id, sender_id, content):
        before = message_count()
        with pytest.raises(ValidationError):
            ingress.post_message(group_id, sender_id, content)
        assert message_count() == before
        assert recorder.calls == []

    def test_store_failure_skips_broadcast(self, ingress, recorder):
        before = message_count()
        with pytest.raises(StoreError):
            ingress.post_message(9999, LEADER_ID, 'Into the void')
        assert message_count() == before
        assert recorder.calls == []

    def test_broadcast_failure_still_returns_id(self, store):
        ingress = MessageIngress(store, ExplodingDispatcher())
        message_id = ingress.post_message(WORSHIP_TEAM_ID, LEADER_ID, 'Still saved')
        assert store.select_by_id(message_id)['content'] == 'Still saved'

    def test_sequential_posts_keep_order(self, store):
        registry = ChannelRegistry()
        watcher = FakeConnection('watcher')
        registry.attach(WORSHIP_TEAM_ID, watcher)
        ingress = MessageIngress(store, BroadcastDispatcher(registry))

        ids = [ingress.post_message(WORSHIP_TEAM_ID, LEADER_ID, f'msg {n}') for n in range(5)]

        history_ids = [m['id'] for m in store.select_by_group(WORSHIP_TEAM_ID)]
        assert history_ids[-5:] == ids
        assert [e['message']['id'] for e in watcher.received] == ids


class TestReadHistory:

    def test_member_sees_history(self, store, membership):
        history = read_history(store, membership, WORSHIP_TEAM_ID, MEMBER_ID, 'member')
        assert [m['content'] for m in history] == ['Hi team, rehearsal is at 6 PM tomorrow!']

    def test_elevated_role_sees_history_without_membership(self, store, membership):
        assert len(read_history(store, membership, WORSHIP_TEAM_ID, 1, 'super_admin')) == 1

    def test_non_member_gets_empty_history(self, store, membership, make_user):
        outsider = make_user('Carol King', 'carol@church.org')
        assert read_history(store, membership, WORSHIP_TEAM_ID, outsider['id'], 'member') == []

    def test_branch_admin_is_not_elevated(self, store, membership):
        assert read_history(store, membership, WORSHIP_TEAM_ID, 1, 'branch_admin') == []

    def test_new_member_sees_full_history(self, store, membership, make_user, add_member):
        outsider = make_user('Carol King', 'carol@church.org')
        store.insert(WORSHIP_TEAM_ID, LEADER_ID, 'Second note')
        assert read_history(store, membership, WORSHIP_TEAM_ID, outsider['id'], 'member') == []

        add_member(outsider['id'], WORSHIP_TEAM_ID, 'Keys')
        history = read_history(store, membership, WORSHIP_TEAM_ID, outsider['id'], 'member')
        assert [m['content'] for m in history] == [
            'Hi team, rehearsal is at 6 PM tomorrow!',
            'Second note',
        ]


class TestMembershipAuthority:

    def test_is_member(self, membership):
        assert membership.is_member(MEMBER_ID, WORSHIP_TEAM_ID)
        assert not membership.is_member(1, WORSHIP_TEAM_ID)
        assert not membership.is_member(None, WORSHIP_TEAM_ID)

    def test_role_of(self, membership):
        assert membership.role_of(1) == 'super_admin'
        assert membership.role_of(MEMBER_ID) == 'member'
        assert membership.role_of(9999) is None

    def test_members_of(self, membership):
        roster = membership.members_of(WORSHIP_TEAM_ID)
        assert [(m['name'], m['role_in_group']) for m in roster] == [
            ('Jane Smith', 'Leader'),
            ('Bob Wilson', 'Vocalist'),
        ]
