"""The listening socket, the connection loop and shutdown on signals."""

from __future__ import annotations

import logging
import selectors
import signal
import socket

from ircserv.client import Client
from ircserv.dispatch import handle_input
from ircserv.mode_commands import sudden_quit
from ircserv.state import ClientNotFoundError, ServerState

logger = logging.getLogger(__name__)

MAX_PORT = 65535
LISTEN_BACKLOG = 10
_READ_SIZE = 1023
_POLL_INTERVAL = 0.2
_STOP_SIGNALS = ("SIGINT", "SIGQUIT")


def validate_port(port: int) -> int:
    """Return ``port`` if it is a usable TCP port; raise ValueError otherwise."""
    if port <= 0 or port > MAX_PORT:
        raise ValueError("Invalid Port")
    return port


def validate_password(password: str) -> str:
    """Return ``password`` if it is not empty; raise ValueError otherwise."""
    if not password:
        raise ValueError("Password must not be empty")
    return password


def install_signal_handlers(server: Server) -> None:
    """Make SIGINT and SIGQUIT stop ``server``'s loop."""

    def _handler(signum: int, frame: object) -> None:
        server.stop()

    for name in _STOP_SIGNALS:
        signum = getattr(signal, name, None)
        if signum is not None:
            signal.signal(signum, _handler)


class Server:
    """A TCP chat server on ``port`` that admits clients knowing ``password``."""

    def __init__(self, port: int, password: str) -> None:
        self.port = validate_port(port)
        self.password = validate_password(password)
        self.state = ServerState(self.password, self._deliver)
        self.running = False
        self._listener: socket.socket | None = None
        self._selector: selectors.BaseSelector | None = None
        self._sockets: dict[int, socket.socket] = {}

    def start(self) -> None:
        """Create, bind and listen on the server socket."""
        listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            listener.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            listener.bind(("", self.port))
            logger.info("Socket bound to port %d", self.port)
            listener.listen(LISTEN_BACKLOG)
        except OSError:
            listener.close()
            raise
        logger.info("Server listening on port %d", self.port)
        listener.setblocking(False)
        self._selector = selectors.DefaultSelector()
        self._selector.register(listener, selectors.EVENT_READ)
        self._listener = listener
        self.running = True

    def serve_forever(self) -> None:
        """Serve connections until :meth:`stop` is called, then close everything."""
        if self._listener is None or self._selector is None:
            raise RuntimeError("Server is not started")
        logger.info("Server started. Waiting for connections...")
        try:
            while self.running:
                for key, _ in self._selector.select(timeout=_POLL_INTERVAL):
                    if key.fileobj is self._listener:
                        self._accept()
                    else:
                        self._service(key.fileobj)
        finally:
            self._close()

    def stop(self) -> None:
        """Ask the loop to finish."""
        self.running = False

    def _deliver(self, fd: int, message: str) -> None:
        sock = self._sockets.get(fd)
        if sock is None:
            return
        try:
            sock.sendall(message.encode("utf-8"))
        except OSError as exc:
            logger.warning("Failed to send to client %d: %s", fd, exc)

    def _accept(self) -> None:
        assert self._listener is not None and self._selector is not None
        try:
            sock, address = self._listener.accept()
        except BlockingIOError:
            return
        except OSError as exc:
            logger.error("Failed to accept connection: %s", exc)
            return
        sock.setblocking(False)
        fd = sock.fileno()
        self._sockets[fd] = sock
        self._selector.register(sock, selectors.EVENT_READ)
        self.state.add_client(Client(fd=fd, address=address))
        logger.info("New client connected (fd: %d) from %s:%d", fd, address[0], address[1])
        self._deliver(fd, "Input password!\n")

    @staticmethod
    def _read(sock: socket.socket) -> str | None:
        """Read what is available up to a full line; None when the peer is gone."""
        received = bytearray()
        while True:
            try:
                chunk = sock.recv(_READ_SIZE)
            except BlockingIOError:
                break
            except OSError:
                return None
            if not chunk:
                return None
            received += chunk
            if b"\n" in chunk:
                break
        return received.decode("utf-8", errors="replace")

    def _service(self, sock: socket.socket) -> None:
        fd = sock.fileno()
        data = self._read(sock)
        if data is None or not handle_input(self.state, fd, data):
            self._disconnect(fd)

    def _disconnect(self, fd: int) -> None:
        try:
            client = self.state.search_client(fd)
        except ClientNotFoundError:
            client = None
        if client is not None:
            if client.authenticated:
                sudden_quit(self.state, client)
            else:
                self.state.remove_client(fd)
                logger.info("Client disconnected (fd: %d)", fd)
        sock = self._sockets.pop(fd, None)
        if sock is not None:
            if self._selector is not None:
                self._selector.unregister(sock)
            sock.close()

    def _close(self) -> None:
        for sock in self._sockets.values():
            sock.close()
        self._sockets.clear()
        self.state.clients.clear()
        self.state.channels.clear()
        if self._selector is not None:
            self._selector.close()
            self._selector = None
        if self._listener is not None:
            self._listener.close()
            self._listener = None
        self.running = False