"""Shared server state: connected clients, channels and message delivery."""

from __future__ import annotations

import logging
from collections.abc import Callable

from ircserv.channel import Channel
from ircserv.client import Client

logger = logging.getLogger(__name__)

SendFunc = Callable[[int, str], None]

MAX_CHANNEL_NAME = 200
_FORBIDDEN_CHANNEL_CHARS = frozenset(" ,\x07")


class ClientNotFoundError(LookupError):
    """Raised when no connected client has the requested descriptor."""

    def __init__(self, fd: int) -> None:
        super().__init__(f"Client not found: {fd}")
        self.fd = fd


def valid_channel(name: str) -> bool:
    """Tell whether ``name`` may be used as a new channel's name."""
    if len(name) > MAX_CHANNEL_NAME:
        return False
    return not any(char in _FORBIDDEN_CHANNEL_CHARS for char in name)


class ServerState:
    """Everything the command handlers read and change.

    Delivery goes through the ``send`` callable, which receives the
    destination descriptor and the text to deliver.  Without one, messages
    are kept in ``outbox`` as ``(fd, message)`` pairs.
    """

    def __init__(self, password: str, send: SendFunc | None = None) -> None:
        self.password = password
        self.outbox: list[tuple[int, str]] = []
        self._send = send or self._keep
        self.clients: list[Client] = []
        self.channels: list[Channel] = []

    def _keep(self, fd: int, message: str) -> None:
        self.outbox.append((fd, message))

    def add_client(self, client: Client) -> Client:
        """Register a newly connected client and return it."""
        self.clients.append(client)
        return client

    def remove_client(self, fd: int) -> Client:
        """Forget the client with descriptor ``fd`` and return it."""
        client = self.search_client(fd)
        self.clients.remove(client)
        return client

    def search_channel(self, name: str) -> Channel | None:
        return next((ch for ch in self.channels if ch.name == name), None)

    def search_client(self, fd: int) -> Client:
        """Return the client with descriptor ``fd``; raise if there is none."""
        for client in self.clients:
            if client.fd == fd:
                return client
        raise ClientNotFoundError(fd)

    def search_client_by_nick(self, nickname: str) -> Client | None:
        return next((c for c in self.clients if c.nickname == nickname), None)

    def unique_nickname(self, nickname: str) -> bool:
        return all(c.nickname != nickname for c in self.clients)

    def unique_username(self, username: str) -> bool:
        return all(c.username != username for c in self.clients)

    def send(self, fd: int, message: str) -> None:
        """Deliver ``message`` to the client on ``fd``."""
        self._send(fd, message)

    def broadcast(self, message: str, channel: Channel) -> None:
        """Deliver ``message`` to every member of ``channel``."""
        for member in list(channel.clients):
            logger.debug("Sending mode change to client %d: %s", member.fd, message)
            self.send(member.fd, message)