from backend.chat import GroupChatView, merge_message


def msg(n, group_id=7, content=None):
    return {
        'id': n,
        'group_id': group_id,
        'sender_id': 2,
        'sender_name': 'Jane Smith',
        'content': content or f'message {n}',
        'timestamp': f'2026-02-22T09:00:0{n}+00:00',
    }


def push(message):
    return {'type': 'NEW_MESSAGE', 'message': message}


def test_merge_message_appends_new():
    assert merge_message([msg(1)], msg(2)) == [msg(1), msg(2)]


def test_merge_message_ignores_known_id():
    messages = [msg(1), msg(2)]
    assert merge_message(messages, msg(2)) == messages


def test_push_is_appended_after_history():
    view = GroupChatView(7, [msg(1), msg(2)])
    assert view.apply_event(push(msg(3))) is True
    assert view.message_ids == [1, 2, 3]


def test_same_push_twice_is_idempotent():
    once = GroupChatView(7, [msg(1)])
    once.apply_event(push(msg(2)))

    twice = GroupChatView(7, [msg(1)])
    twice.apply_event(push(msg(2)))
    assert twice.apply_event(push(msg(2))) is False

    assert twice.messages == once.messages


def test_push_for_message_already_in_history():
    view = GroupChatView(7, [msg(1), msg(2)])
    assert view.apply_event(push(msg(2))) is False
    assert view.message_ids == [1, 2]


def test_own_message_echo_is_kept_once():
    view = GroupChatView(7, [msg(1)])
    # The sender's socket gets its own broadcast after the post returned
    view.apply_event(push(msg(2, content='Hello')))
    view.apply_event(push(msg(2, content='Hello')))
    assert [m['content'] for m in view.messages] == ['message 1', 'Hello']


def test_pushes_are_not_reordered():
    view = GroupChatView(7)
    for n in (3, 1, 2):
        view.apply_event(push(msg(n)))
    assert view.message_ids == [3, 1, 2]


def test_other_groups_and_event_types_are_ignored():
    view = GroupChatView(7, [msg(1)])
    assert view.apply_event(push(msg(5, group_id=9))) is False
    assert view.apply_event({'type': 'TYPING', 'message': msg(6)}) is False
    assert view.apply_event(None) is False
    assert view.message_ids == [1]


def test_reloading_history_fills_gaps():
    view = GroupChatView(7, [msg(1)])
    view.apply_event(push(msg(3)))
    # Missed message 2 while disconnected; refetch replaces the view
    view.load_history([msg(1), msg(2), msg(3)])
    assert view.message_ids == [1, 2, 3]
