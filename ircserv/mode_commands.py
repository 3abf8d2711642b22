"""Handlers for MODE, TOPIC, KICK and QUIT, and for a dropped connection."""

from __future__ import annotations

import logging
import re

from ircserv.channel import Channel
from ircserv.client import Client
from ircserv.state import ServerState
from ircserv.utils import args_split, time_to_string

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _prefix(client: Client) -> str:
    return f":{client.nickname}!{client.username}@host"


def _not_enough(client: Client, command: str) -> str:
    return f":ircserver.local 461 {client.nickname} {command}: not enough parameters\r\n"


def _parse_int(text: str) -> int:
    """Read a leading integer the lenient way; anything else counts as 0."""
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


def _reason(words: list[str]) -> str:
    """Join trailing words, each followed by a space, dropping a leading ':'."""
    parts = list(words)
    if parts and parts[0].startswith(":"):
        parts[0] = parts[0][1:]
    return "".join(f"{part} " for part in parts)


def _mode_query(state: ServerState, client: Client, channel: Channel, name: str) -> None:
    modes = "".join(channel.flags)
    params = "".join(
        f" {channel.limit}" for flag in channel.flags if flag == "l" and channel.has_limit()
    )
    message = f":ircserver.local 324 {client.nickname} #{name} +{modes}{params}\r\n"
    state.send(client.fd, message)
    logger.info("%s", message.rstrip())


def handle_mode(state: ServerState, client: Client, line: str) -> None:
    """MODE #name [changes [parameter]]"""
    args = args_split(line)
    if len(args) < 2:
        state.send(client.fd, _not_enough(client, "MODE"))
        return
    name = args[1].removeprefix("#")
    channel = state.search_channel(name)
    if channel is None:
        state.send(
            client.fd, f":ircserver.local 403 {client.nickname} MODE: no such channel\r\n"
        )
        return

    changes = args[2] if len(args) > 2 else ""
    if not changes:
        _mode_query(state, client, channel, name)
        return

    if not channel.is_operator(client):
        state.send(
            client.fd,
            f":ircserver.local 482 {client.nickname} #{name} :You're not a channel operator\r\n",
        )
        return

    prefix = f"{_prefix(client)} MODE #{name}"
    param = args[3] if len(args) > 3 else ""
    add = True
    for flag in changes:
        if flag == "-":
            add = False
            continue
        if flag == "+":
            continue
        sign = "+" if add else "-"

        if flag == "i":
            channel.set_invite_only(add)
            state.broadcast(f"{prefix} {sign}i\r\n", channel)
        elif flag == "t":
            channel.set_topic_lock(add)
            state.broadcast(f"{prefix} {sign}t\r\n", channel)
        elif flag == "k":
            if add:
                if not param:
                    state.send(client.fd, "MODE +k requires a key\n")
                    continue
                channel.set_key(param, True)
            else:
                channel.set_key("", False)
            key_param = f" {channel.key}" if add else ""
            state.broadcast(f"{prefix} {sign}k{key_param}\r\n", channel)
        elif flag == "o":
            if not param:
                state.send(client.fd, f"MODE {sign}o requires a nickname\n")
                continue
            target = state.search_client_by_nick(param)
            if target is None or not channel.has_client(target):
                state.send(client.fd, "No such nickname in channel\n")
                continue
            if add:
                channel.add_op(target)
            else:
                channel.remove_op(target)
            state.broadcast(f"{prefix} {sign}o {param}\r\n", channel)
        elif flag == "l":
            if add:
                if not param:
                    state.send(client.fd, "MODE +l requires a limit\n")
                    continue
                limit = _parse_int(param)
                if limit <= 0:
                    state.send(client.fd, "Limit must be > 0\n")
                    continue
                channel.set_limit(limit, True)
            else:
                channel.set_limit(0, False)
            limit_param = f" {channel.limit}" if add and channel.has_limit() else ""
            state.broadcast(f"{prefix} {sign}l{limit_param}\r\n", channel)


def handle_topic(state: ServerState, client: Client, line: str) -> None:
    """TOPIC #name [:new topic]"""
    args = args_split(line)
    if len(args) < 2:
        state.send(client.fd, _not_enough(client, "TOPIC"))
        return
    name = args[1].removeprefix("#")
    channel = state.search_channel(name)
    if channel is None:
        state.send(client.fd, "No such channel.\n")
        return
    if not channel.has_client(client):
        state.send(
            client.fd, f":ircserver.local 442 {client.nickname} :You're not on that channel\r\n"
        )
        return

    if len(args) == 2:
        state.send(
            client.fd, f":ircserver.local 332 {client.nickname} #{name} :{channel.topic}\r\n"
        )
        if channel.topic_setter:
            state.send(
                client.fd,
                f":ircserver.local 333 {client.nickname} #{name} :{channel.topic_setter} "
                f"{time_to_string(channel.timestamp)}\r\n",
            )
        return

    if channel.topic_locked and not channel.is_operator(client):
        state.send(
            client.fd,
            f":ircserver.local 482 {client.nickname} #{name} :You're not a channel operator\r\n",
        )
        return

    new_topic = line[line.find(args[2]):].removeprefix(":")
    channel.set_topic(new_topic, client.nickname)
    message = f"{_prefix(client)} TOPIC #{name} :{new_topic}\r\n"
    for member in list(channel.clients):
        logger.debug("Sending topic change to client %d: %s", member.fd, message)
        state.send(member.fd, message)


def handle_kick(state: ServerState, client: Client, line: str) -> None:
    """KICK #name nick [:reason]"""
    args = args_split(line)
    if len(args) < 3:
        state.send(client.fd, _not_enough(client, "KICK"))
        return
    name = args[1].removeprefix("#")
    channel = state.search_channel(name)
    if channel is None:
        state.send(
            client.fd, f":ircserver.local 403 {client.nickname} KICK: no such channel\r\n"
        )
        return
    if not channel.is_operator(client):
        state.send(
            client.fd,
            f":ircserver.local 482 {client.nickname} KICK: not an operator of this channel\r\n",
        )
        return

    target_nick = args[2]
    reason = _reason(args[3:]) or "No reason specified"
    message = f"{_prefix(client)} KICK #{name} {target_nick} :{reason}\r\n"

    found = False
    for member in list(channel.clients):
        if member.nickname != target_nick:
            continue
        state.send(member.fd, message)
        if channel.is_operator(member):
            channel.remove_op(member)
        channel.remove_client(member)
        found = True

    if not found:
        state.send(client.fd, f":ircserver.local 442 {client.nickname} KICK: user not found\r\n")
        return
    for member in list(channel.clients):
        state.send(member.fd, message)


def _leave_all_channels(state: ServerState, client: Client, message: str) -> None:
    """Take ``client`` out of every channel, telling the remaining members."""
    for channel in list(state.channels):
        if not channel.has_client(client):
            continue
        channel.remove_client(client)
        if channel.is_operator(client):
            channel.remove_op(client)
        channel.remove_invite(client.fd)
        for member in list(channel.clients):
            if member.fd != client.fd:
                state.send(member.fd, message)
        if not channel.clients:
            logger.info("Channel #%s deleted as it has no clients left.", channel.name)
            state.channels.remove(channel)


def handle_quit(state: ServerState, client: Client, line: str) -> None:
    """QUIT [:reason]: leave every channel and drop authentication."""
    reason = _reason(args_split(line)[1:])
    _leave_all_channels(state, client, f"{_prefix(client)} QUIT {reason}\r\n")
    client.toggle_authentication()
    logger.info("Client %d quit: %s", client.fd, reason)


def sudden_quit(state: ServerState, client: Client) -> None:
    """Handle a connection that went away: leave channels and forget the client."""
    _leave_all_channels(state, client, f"{_prefix(client)} QUIT \r\n")
    logger.info("Client disconnected (fd: %d)", client.fd)
    state.remove_client(client.fd)