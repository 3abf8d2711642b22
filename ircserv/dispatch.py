"""Routing of received lines to authentication, commands and messages."""

from __future__ import annotations

import logging

from ircserv.channel_commands import (
    change_nickname,
    change_username,
    handle_invite,
    handle_who,
    join_channel,
    leave_channel,
)
from ircserv.client import Client
from ircserv.mode_commands import handle_kick, handle_mode, handle_quit, handle_topic
from ircserv.state import ServerState
from ircserv.utils import first_word, split_lines

logger = logging.getLogger(__name__)

HELP_MESSAGE = (
    "=== IRC Server Commands ===\r\n"
    "\r\n"
    "OPERATOR COMMANDS:\r\n"
    "* KICK - Eject a client from the channel\r\n"
    "* INVITE - Invite a client to a channel\r\n"
    "* TOPIC - Change or view the channel topic\r\n"
    "* MODE - Change the channel's mode:\r\n"
    "  · i: Set/remove Invite-only channel\r\n"
    "  · t: Set/remove the restrictions of the TOPIC command to channel operators\r\n"
    "  · k: Set/remove the channel key (password)\r\n"
    "  · o: Give/take channel operator privilege\r\n"
    "  · l: Set/remove the user limit to channel\r\n"
    "\r\n"
    "BASIC COMMANDS:\r\n"
    "* JOIN #channel - Join a channel\r\n"
    "* PART #channel - Leave a channel\r\n"
    "* PRIVMSG #channel :message - Send message to channel\r\n"
    "* PRIVMSG nickname :message - Send private message\r\n"
    "* NICK newnick - Change your nickname\r\n"
    "* QUIT - Disconnect from server\r\n"
    "\r\n"
    "Type *Guide* for this help again.\r\n"
    "===============================\r\n"
)

_COMMANDS = (
    ("NICK ", change_nickname),
    ("JOIN ", join_channel),
    ("USER ", change_username),
    ("PART ", leave_channel),
    ("WHO ", handle_who),
    ("MODE ", handle_mode),
    ("TOPIC ", handle_topic),
    ("KICK ", handle_kick),
    ("INVITE ", handle_invite),
)


def check_commands(state: ServerState, client: Client, line: str) -> bool:
    """Run the command in ``line`` if it is one; tell whether it was."""
    if line == "*Guide*":
        state.send(client.fd, HELP_MESSAGE)
        return True
    for prefix, handler in _COMMANDS:
        if line.startswith(prefix):
            handler(state, client, line)
            return True
    return False


def send_private_message(state: ServerState, line: str, sender_fd: int) -> None:
    """PRIVMSG nick :text; unknown targets are silently ignored."""
    if not line.startswith("PRIVMSG "):
        return
    rest = line[8:]
    target_nick = first_word(rest)
    target = state.search_client_by_nick(target_nick)
    if target is None:
        return
    sender = state.search_client(sender_fd)
    content = rest[len(target_nick) + 2:]
    state.send(
        target.fd,
        f":{sender.nickname}!{sender.username}@host PRIVMSG {target.nickname} :{content}\n",
    )


def send_channel_message(state: ServerState, line: str, sender_fd: int) -> None:
    """PRIVMSG #name :text to every other member; other lines go private."""
    if len(line) < 10 or not line.startswith("PRIVMSG #"):
        send_private_message(state, line, sender_fd)
        return
    rest = line[9:]
    name = first_word(rest)
    content = rest[len(name) + 2:]
    channel = state.search_channel(name)
    if channel is None:
        return
    sender = state.search_client(sender_fd)
    message = f":{sender.nickname}!{sender.username}@host PRIVMSG #{name} :{content}\n"
    for member in list(channel.clients):
        if member.fd == sender_fd:
            continue
        logger.debug("%s", message.rstrip())
        state.send(member.fd, message)


def handle_input(state: ServerState, fd: int, data: str) -> bool:
    """Process text received from ``fd``.

    Returns False when the connection should be closed: a wrong password
    or a QUIT.
    """
    if not data:
        return True
    client = state.search_client(fd)
    state.send(fd, "\n")

    for raw in split_lines(data):
        line = raw.removesuffix("\r")
        logger.info("Received from client %d: %s", fd, line)
        if line == "CAP LS 302":
            state.send(fd, "CAP * LS :ircv3 multi-prefix\n")
            continue
        if line == ";":
            continue

        if not client.authenticated:
            if line != f"PASS {state.password}":
                state.send(fd, "Wrong password!\n")
                logger.info("Client disconnected due to wrong password (fd: %d)", fd)
                return False
            client.toggle_authentication()
            state.send(fd, "Welcome\n Type *Guide* for more information.\n")
            continue

        if check_commands(state, client, line):
            continue
        if line.startswith("QUIT ") or line == "QUIT":
            handle_quit(state, client, line)
            return False
        send_channel_message(state, line, fd)
    return True