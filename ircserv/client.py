"""A connected client and its identity on the server."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Client:
    """One connection, identified by its file descriptor."""

    fd: int
    address: tuple[str, int] | None = None
    nickname: str = ""
    username: str = ""
    authenticated: bool = False
    server_operator: bool = False
    username_defined: bool = False

    def __post_init__(self) -> None:
        if not self.nickname:
            self.nickname = f"Guest{self.fd}"
        if not self.username:
            self.username = f"User{self.fd}"

    def set_nickname(self, nickname: str) -> None:
        """Change the nickname; an empty value is ignored."""
        if nickname:
            self.nickname = nickname

    def set_username(self, username: str) -> None:
        """Change the username; an empty value is ignored."""
        if username:
            self.username = username

    def toggle_authentication(self) -> None:
        """Flip the authenticated state."""
        self.authenticated = not self.authenticated

    def toggle_operator(self) -> None:
        """Flip the server operator state."""
        self.server_operator = not self.server_operator