import pytest

from ircserv.channel import Channel
from ircserv.client import Client
from ircserv.state import ClientNotFoundError, ServerState, valid_channel

PASSWORD = "password"


@pytest.fixture
def env():
    sent = []
    state = ServerState(PASSWORD, lambda fd, msg: sent.append((fd, msg)))
    a = state.add_client(Client(3))
    b = state.add_client(Client(4))
    return state, sent, a, b


@pytest.mark.parametrize(
    "name, expected",
    [
        ("general", True),
        ("", True),
        ("a b", False),
        ("a,b", False),
        ("a\x07b", False),
        ("x" * 200, True),
        ("x" * 201, False),
    ],
)
def test_valid_channel(name, expected):
    assert valid_channel(name) is expected


def test_password_kept(env):
    state, _, _, _ = env
    assert state.password == PASSWORD


def test_search_client_found(env):
    state, _, a, b = env
    assert state.search_client(3) is a
    assert state.search_client(4) is b


def test_search_client_missing_raises(env):
    state, _, _, _ = env
    with pytest.raises(ClientNotFoundError) as info:
        state.search_client(99)
    assert info.value.fd == 99


def test_search_client_by_nick(env):
    state, _, a, _ = env
    assert state.search_client_by_nick("Guest3") is a
    assert state.search_client_by_nick("nobody") is None


def test_unique_nickname_and_username(env):
    state, _, _, _ = env
    assert state.unique_nickname("Guest3") is False
    assert state.unique_nickname("fresh") is True
    assert state.unique_username("User4") is False
    assert state.unique_username("fresh") is True


def test_search_channel(env):
    state, _, _, _ = env
    room = Channel("room")
    state.channels.append(room)
    assert state.search_channel("room") is room
    assert state.search_channel("other") is None


def test_send_goes_through_callable(env):
    state, sent, _, _ = env
    state.send(3, "hello\r\n")
    assert sent == [(3, "hello\r\n")]


def test_broadcast_reaches_every_member(env):
    state, sent, a, b = env
    room = Channel("room")
    room.add_client(a)
    room.add_client(b)
    state.broadcast("msg\r\n", room)
    assert sent == [(3, "msg\r\n"), (4, "msg\r\n")]


def test_remove_client(env):
    state, _, a, b = env
    assert state.remove_client(3) is a
    assert state.clients == [b]
    with pytest.raises(ClientNotFoundError):
        state.remove_client(3)


def test_default_send_discards():
    state = ServerState(PASSWORD)
    client = state.add_client(Client(7))
    state.send(7, "ignored")
    assert state.clients == [client]