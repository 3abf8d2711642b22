"""A channel: its members, operators, modes and topic."""

from __future__ import annotations

import time
from dataclasses import dataclass, field

from ircserv.client import Client


@dataclass
class Channel:
    """State of one channel. Members are matched by file descriptor."""

    name: str
    clients: list[Client] = field(default_factory=list)
    ops: list[Client] = field(default_factory=list)
    flags: list[str] = field(default_factory=list)
    topic: str = ""
    topic_setter: str = ""
    timestamp: int = 0
    invite_only: bool = False
    invites: list[int] = field(default_factory=list)
    topic_locked: bool = False
    key: str = ""
    limit: int = 0

    @staticmethod
    def _remove_by_fd(members: list[Client], client: Client) -> None:
        for index, member in enumerate(members):
            if member.fd == client.fd:
                del members[index]
                return

    def add_client(self, client: Client) -> None:
        self.clients.append(client)

    def remove_client(self, client: Client) -> None:
        self._remove_by_fd(self.clients, client)

    def add_op(self, client: Client) -> None:
        self.ops.append(client)

    def remove_op(self, client: Client) -> None:
        self._remove_by_fd(self.ops, client)

    def is_operator(self, client: Client) -> bool:
        return any(op.fd == client.fd for op in self.ops)

    def has_client(self, client: Client) -> bool:
        return any(member.fd == client.fd for member in self.clients)

    def add_flag(self, flag: str) -> None:
        if flag not in self.flags:
            self.flags.append(flag)

    def remove_flag(self, flag: str) -> None:
        if flag in self.flags:
            self.flags.remove(flag)

    def change_flag(self, flag: str, add: bool) -> None:
        if add:
            self.add_flag(flag)
        else:
            self.remove_flag(flag)

    def has_flag(self, flag: str) -> bool:
        return flag in self.flags

    def set_topic(self, topic: str, setter: str) -> None:
        """Set the topic, recording who set it and when."""
        self.topic = topic
        self.timestamp = int(time.time())
        self.topic_setter = setter

    def set_invite_only(self, add: bool) -> None:
        self.invite_only = add
        self.change_flag("i", add)

    def add_invite(self, client_id: int) -> None:
        self.invites.append(client_id)

    def remove_invite(self, client_id: int) -> None:
        if client_id in self.invites:
            self.invites.remove(client_id)

    def is_invited(self, client_id: int) -> bool:
        return client_id in self.invites

    def set_topic_lock(self, add: bool) -> None:
        self.topic_locked = add
        self.change_flag("t", add)

    def has_key(self) -> bool:
        return bool(self.key)

    def set_key(self, key: str, add: bool) -> None:
        """Set or clear the channel key; the 'k' flag follows ``add``."""
        self.key = key if add and key else ""
        self.change_flag("k", add)

    def check_key(self, attempted: str) -> bool:
        return self.key == attempted

    def has_limit(self) -> bool:
        return self.limit > 0

    def set_limit(self, limit: int, add: bool) -> None:
        """Set or clear the user limit; the 'l' flag follows ``add``."""
        self.limit = limit if add and limit > 0 else 0
        self.change_flag("l", add)

    def _matching(self, client: Client) -> list[Client]:
        return [m for m in (*self.clients, *self.ops) if m.fd == client.fd]

    def update_nickname(self, nickname: str, client: Client) -> None:
        """Propagate a nickname change to the stored member records."""
        for member in self._matching(client):
            member.set_nickname(nickname)

    def update_username(self, username: str, client: Client) -> None:
        """Propagate a username change to the stored member records."""
        for member in self._matching(client):
            member.set_username(username)
            member.username_defined = True