"""Handlers for JOIN, NICK, USER, PART, WHO and INVITE."""

from __future__ import annotations

import logging

from ircserv.channel import Channel
from ircserv.client import Client
from ircserv.state import ServerState, valid_channel
from ircserv.utils import args_split, comma_split, first_word

logger = logging.getLogger(__name__)


def _not_enough(client: Client, command: str) -> str:
    return f":ircserver.local 461 {client.nickname} {command}: not enough parameters\r\n"


def _prefix(client: Client) -> str:
    return f":{client.nickname}!{client.username}@host"


def join_channel(state: ServerState, client: Client, line: str) -> None:
    """JOIN name[,name...] [key[,key...]]"""
    args = args_split(line)
    if len(args) < 2:
        state.send(client.fd, _not_enough(client, "JOIN"))
        return

    operator_flag = False
    keys_used = 0
    for name in comma_split(args[1]):
        channel = state.search_channel(name)
        if channel is None:
            if not valid_channel(name):
                state.send(client.fd, "Invalid channel name.\r\n")
                return
            channel = Channel(name)
            state.channels.append(channel)
            operator_flag = True

        if channel.has_client(client):
            state.send(client.fd, "You are already in this channel!\n")
            return

        if (
            channel.invite_only
            and not channel.is_invited(client.fd)
            and not channel.is_operator(client)
        ):
            state.send(
                client.fd,
                f":ircserver.local 473 {client.nickname} #{name} :Cannot join channel (+i)\r\n",
            )
            return

        if channel.has_key():
            if len(args) < 3:
                state.send(client.fd, _not_enough(client, "JOIN"))
                return
            keys = comma_split(args[2])
            attempted = keys[keys_used] if keys_used < len(keys) else ""
            if not channel.check_key(attempted):
                state.send(
                    client.fd,
                    f":ircserver.local 475 {client.nickname} #{name} :Cannot join channel (+k)\r\n",
                )
                return
            keys_used += 1

        if channel.has_limit() and len(channel.clients) >= channel.limit:
            state.send(
                client.fd,
                f":ircserver.local 471 {client.nickname} #{name} :Cannot join channel (+l)\r\n",
            )
            return

        channel.add_client(client)
        channel.remove_invite(client.fd)
        if operator_flag:
            channel.add_op(client)

        joined = f"{_prefix(client)} JOIN :#{name}\n"
        state.send(client.fd, joined)
        logger.info("Client %d joined channel %s", client.fd, name)

        names = "".join(
            ("@" if channel.is_operator(member) else "") + member.nickname + " "
            for member in channel.clients
        )
        for member in channel.clients:
            if member.fd != client.fd:
                state.send(member.fd, joined)
        state.send(
            client.fd, f":ircserver.local 353 {client.nickname} = #{name} :{names}\r\n"
        )
        state.send(
            client.fd,
            f":ircserver.local 366 {client.nickname} #{name} :End of /NAMES list\r\n",
        )


def change_nickname(state: ServerState, client: Client, line: str) -> None:
    """NICK newnick"""
    new_nick = first_word(line[5:])
    if not new_nick or new_nick == client.nickname:
        return

    if not state.unique_nickname(new_nick):
        current = client.nickname or "*"
        state.send(
            client.fd,
            f":ircserver.local 433 {current} {new_nick} :Nickname is already in use\r\n",
        )
        logger.info(
            "Client %d tried to change nickname to an already used nickname: %s",
            client.fd,
            new_nick,
        )
        return

    had_nick = bool(client.nickname)
    notice = f"{_prefix(client)} NICK :{new_nick}\r\n"
    if had_nick:
        state.send(client.fd, notice)

    for channel in state.channels:
        if not channel.has_client(client):
            continue
        for member in channel.clients:
            if member.fd == client.fd:
                continue
            logger.debug("Sending nickname change to user %s", member.username)
            state.send(member.fd, notice)
        channel.update_nickname(new_nick, client)

    client.set_nickname(new_nick)
    if had_nick and client.username_defined:
        state.send(
            client.fd,
            f":ircserver.local 001 {client.nickname} :Welcome to the Internet Relay Network "
            f"{client.nickname}!{client.username}@host\r\n",
        )
    logger.info("Client %d changed nickname to %s", client.fd, new_nick)


def change_username(state: ServerState, client: Client, line: str) -> None:
    """USER name; the username may only be set once."""
    if client.username_defined:
        state.send(client.fd, "Username is already set!\n")
        return
    new_user = first_word(line[5:])
    if not new_user:
        state.send(client.fd, "Invalid username!\n")
        return

    for channel in state.channels:
        if channel.has_client(client):
            channel.update_username(new_user, client)
    client.username_defined = True
    client.set_username(new_user)
    logger.info("Client %d set username to %s", client.fd, new_user)


def leave_channel(state: ServerState, client: Client, line: str) -> None:
    """PART #name[,#name...]"""
    args = args_split(line)
    if len(args) < 2:
        state.send(client.fd, _not_enough(client, "JOIN"))
        return

    for requested in comma_split(args[1]):
        name = requested.removeprefix("#")
        channel = state.search_channel(name)
        if channel is None:
            state.send(client.fd, "You are not in this channel!\n")
            return
        channel.remove_client(client)
        if channel.is_operator(client):
            channel.remove_op(client)

        state.send(client.fd, f"{_prefix(client)} PART #{name}\n")
        notice = f"{_prefix(client)} PART #{name}\r\n"
        for member in channel.clients:
            state.send(member.fd, notice)
        logger.info("Client %d left channel #%s", client.fd, name)

        if not channel.clients:
            state.channels.remove(channel)
            logger.info("Channel #%s deleted as it has no clients left.", name)


def handle_who(state: ServerState, client: Client, line: str) -> None:
    """WHO #name: list the members of a channel."""
    args = args_split(line)
    if len(args) < 2:
        state.send(client.fd, "Invalid channel name!\n")
        return
    name = args[1].removeprefix("#")
    channel = state.search_channel(name)
    if channel is None:
        state.send(client.fd, "No such channel.\n")
        return

    for member in channel.clients:
        state.send(
            client.fd,
            f":ircserver.local 352 {client.nickname} #{name} {member.username} "
            f"localhost ircserver.local {member.nickname} H :0 {member.nickname}\r\n",
        )
    state.send(
        client.fd, f":ircserver.local 315 {client.nickname} #{name} :End of /WHO list.\r\n"
    )


def _send_invitation(
    state: ServerState, client: Client, target: Client, nick: str, name: str
) -> None:
    state.send(client.fd, f":ircserver.local 341 {client.nickname} {nick} #{name}\r\n")
    state.send(target.fd, f"{_prefix(client)} INVITE {nick} :#{name}\r\n")


def _no_such_nick(client: Client, name: str) -> str:
    return f":ircserver.local 401 {client.nickname} #{name} :No such nickname\r\n"


def handle_invite(state: ServerState, client: Client, line: str) -> None:
    """INVITE nick #name"""
    args = args_split(line)
    if len(args) < 3:
        state.send(client.fd, _not_enough(client, "INVITE"))
        return
    nick = args[1]
    name = args[2].removeprefix("#")
    logger.info("Invite command: nick=%s, chan=%s", nick, name)

    channel = state.search_channel(name)
    if channel is None:
        target = state.search_client_by_nick(nick)
        if target is None:
            state.send(client.fd, _no_such_nick(client, name))
            return
        _send_invitation(state, client, target, nick, name)
        return

    if channel.invite_only and not channel.is_operator(client):
        state.send(
            client.fd,
            f":ircserver.local 482 {client.nickname} #{name} :You're not a channel operator\r\n",
        )
        return
    if channel.invite_only and not channel.has_client(client):
        state.send(
            client.fd,
            f":ircserver.local 442 {client.nickname} #{name} :You're not part of the channel\r\n",
        )
        return
    if any(member.nickname == nick for member in channel.clients):
        state.send(
            client.fd,
            f":ircserver.local 443 {client.nickname} #{name} :User already on specified channel\r\n",
        )
        return

    target = state.search_client_by_nick(nick)
    if target is None:
        state.send(client.fd, _no_such_nick(client, name))
        return

    channel.add_invite(target.fd)
    _send_invitation(state, client, target, nick, name)