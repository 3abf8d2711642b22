"""Command line entry point: ircserv <port> <password>."""

from __future__ import annotations

import logging
import re
import sys

from ircserv.server import Server, install_signal_handlers, validate_password, validate_port

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _parse_port(text: str) -> int:
    """Read a leading integer leniently; anything else counts as 0."""
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


def main(argv: list[str] | None = None) -> int:
    """Run the server; return the process exit status."""
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) != 2:
        print("Wrong amount of arguments")
        return 1

    try:
        port = validate_port(_parse_port(args[0]))
    except ValueError:
        print("Invalid Port")
        return 1
    try:
        password = validate_password(args[1])
    except ValueError:
        print("Invalid Password")
        return 1

    print(f"{port} {password}")
    logging.basicConfig(level=logging.INFO, format="%(message)s")

    server = Server(port, password)
    try:
        install_signal_handlers(server)
    except (ValueError, OSError) as exc:
        print(f"Error: cannot set signal handler: {exc}", file=sys.stderr)
        return 1

    try:
        server.start()
        server.serve_forever()
    except OSError as exc:
        print(f"Error during server operation: {exc}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())