from ircserv.channel import Channel
from ircserv.client import Client


def make_channel():
    return Channel("room")


def test_new_channel_defaults():
    channel = make_channel()
    assert channel.name == "room"
    assert channel.clients == []
    assert channel.flags == []
    assert channel.has_key() is False
    assert channel.has_limit() is False
    assert channel.invite_only is False
    assert channel.topic_locked is False


def test_add_and_remove_client_by_fd():
    channel = make_channel()
    alice = Client(5)
    channel.add_client(alice)
    assert channel.has_client(Client(5))
    channel.remove_client(Client(5))
    assert not channel.has_client(alice)
    assert channel.clients == []


def test_remove_client_removes_only_first_match():
    channel = make_channel()
    channel.add_client(Client(5))
    channel.add_client(Client(5))
    channel.remove_client(Client(5))
    assert len(channel.clients) == 1


def test_operators():
    channel = make_channel()
    op = Client(9)
    assert not channel.is_operator(op)
    channel.add_op(op)
    assert channel.is_operator(Client(9))
    channel.remove_op(op)
    assert not channel.is_operator(op)


def test_flags_no_duplicates_and_order():
    channel = make_channel()
    channel.set_invite_only(True)
    channel.set_topic_lock(True)
    channel.add_flag("i")
    assert channel.flags == ["i", "t"]
    channel.change_flag("i", False)
    assert channel.flags == ["t"]
    assert channel.has_flag("t") and not channel.has_flag("i")


def test_remove_missing_flag_is_harmless():
    channel = make_channel()
    channel.remove_flag("k")
    assert channel.flags == []


def test_set_invite_only_toggles_state():
    channel = make_channel()
    channel.set_invite_only(True)
    assert channel.invite_only is True
    channel.set_invite_only(False)
    assert channel.invite_only is False
    assert not channel.has_flag("i")


def test_invites():
    channel = make_channel()
    channel.add_invite(4)
    assert channel.is_invited(4)
    assert not channel.is_invited(5)
    channel.remove_invite(4)
    assert not channel.is_invited(4)
    channel.remove_invite(4)
    assert channel.invites == []


def test_set_topic_records_setter_and_time():
    channel = make_channel()
    channel.set_topic("hello world", "alice")
    assert channel.topic == "hello world"
    assert channel.topic_setter == "alice"
    assert channel.timestamp > 0


def test_key_set_check_and_clear():
    channel = make_channel()
    channel.set_key("secret", True)
    assert channel.has_key()
    assert channel.check_key("secret")
    assert not channel.check_key("wrong")
    assert channel.has_flag("k")
    channel.set_key("", False)
    assert not channel.has_key()
    assert not channel.has_flag("k")


def test_empty_key_with_add_sets_flag_but_no_key():
    channel = make_channel()
    channel.set_key("", True)
    assert not channel.has_key()
    assert channel.has_flag("k")


def test_limit_set_and_clear():
    channel = make_channel()
    channel.set_limit(3, True)
    assert channel.has_limit()
    assert channel.limit == 3
    assert channel.has_flag("l")
    channel.set_limit(0, False)
    assert not channel.has_limit()
    assert not channel.has_flag("l")


def test_non_positive_limit_is_no_limit():
    channel = make_channel()
    channel.set_limit(-2, True)
    assert channel.limit == 0
    assert not channel.has_limit()


def test_update_nickname_reaches_clients_and_ops():
    channel = make_channel()
    member = Client(6)
    op_record = Client(6)
    channel.add_client(member)
    channel.add_op(op_record)
    channel.update_nickname("carol", Client(6))
    assert member.nickname == "carol"
    assert op_record.nickname == "carol"


def test_update_username_marks_defined():
    channel = make_channel()
    member = Client(6)
    other = Client(8)
    channel.add_client(member)
    channel.add_client(other)
    channel.update_username("dave", Client(6))
    assert member.username == "dave"
    assert member.username_defined is True
    assert other.username_defined is False
    assert other.username != "dave"