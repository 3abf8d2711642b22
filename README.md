# ircserv

A small IRC server that runs in a single process. It accepts plain TCP
clients, including standard IRC clients and `nc`. A client has to give the
server password before it can use any command. After that it can use
channels, channel modes, topics, kicks, invites and private messages.

## Installation

```
pip install .
```

## Running

```
ircserv <port> <password>
```

The port must be between 1 and 65535, and the password must not be empty.
If either is wrong, or the number of arguments is not two, the command
prints a message and exits with status 1. The server listens on every
interface. It logs connections and commands to standard error, and it stops
cleanly on Ctrl-C (SIGINT) or SIGQUIT.

You can connect with any IRC client, or by hand:

```
nc localhost 6667
PASS <password>
NICK alice
USER alice
JOIN #lobby
PRIVMSG #lobby :hello everyone
```

Lines end with a newline. A trailing carriage return is removed. A client
that sends a wrong password is disconnected. Every client starts as
`Guest<n>` / `User<n>`, where `<n>` is the connection's descriptor.

## Commands

- `PASS <password>`: authenticate. This must be the first command a client sends.
- `NICK <nickname>`: change your nickname. A nickname that is already taken is refused with reply 433.
- `USER <username>`: set your username. It can only be set once.
- `JOIN chan[,chan2] [key[,key2]]`: join one or more channels. If a channel does not exist yet, it is created and you become its operator.
- `PART #chan[,#chan2]`: leave one or more channels. A channel is removed once it is empty.
- `WHO #chan`: list the members of a channel.
- `PRIVMSG #chan :text`: send a message to the other members of a channel.
- `PRIVMSG nick :text`: send a private message to one user.
- `TOPIC #chan`: show the topic and who set it.
- `TOPIC #chan :text`: set the topic. If the channel has mode `+t`, only operators may do this.
- `INVITE nick #chan`: invite a user. If the channel is invite-only, only operators may do this.
- `KICK #chan nick [:reason]`: remove a user from a channel. Only operators may do this.
- `MODE #chan`: show the channel modes.
- `MODE #chan <changes> [arg]`: change the modes. Only operators may do this.
  - `i`: invite-only
  - `t`: only operators may change the topic
  - `k <key>`: set or remove the channel key
  - `o <nick>`: give or take operator status
  - `l <n>`: set or remove the user limit
- `QUIT [:reason]`: leave all channels and disconnect.
- `*Guide*`: show the built-in help text.

## Using it from Python

The server can also be started from Python code:

```python
from ircserv.server import Server, install_signal_handlers

password = "password"
server = Server(6667, password)
install_signal_handlers(server)
server.start()
server.serve_forever()
```

`Server.stop()` ends the loop. When the loop ends, every connection is closed.

The command handlers work on an `ircserv.state.ServerState`. It takes a
`send(fd, message)` callable. If you do not give one, it collects the
messages in `state.outbox` as `(fd, message)` pairs. This lets you drive
the server without any sockets:

```python
from ircserv.client import Client
from ircserv.dispatch import handle_input
from ircserv.state import ServerState

password = "password"
state = ServerState(password)
state.add_client(Client(fd=4))
handle_input(state, 4, f"PASS {password}\nJOIN #lobby\n")
print(state.outbox)
```

`handle_input` returns `False` when the connection should be closed,
that is, after a wrong password or a `QUIT`.

## Limitations

The server handles only the commands listed above. It does not answer
`PING`, and it has no `NOTICE`, `LIST`, `NAMES`, `WHOIS` or server-operator
commands. It does not link to other servers. It keeps nothing on disk:
all clients and channels exist only while the process runs.