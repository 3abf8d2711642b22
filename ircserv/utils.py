"""Small text helpers shared by the command handlers."""

from __future__ import annotations


def first_word(text: str) -> str:
    """Return the part of ``text`` before the first space, or all of it."""
    head, _, _ = text.partition(" ")
    return head


def time_to_string(timestamp: float) -> str:
    """Render a UNIX timestamp as whole seconds."""
    return str(int(timestamp))


def args_split(text: str) -> list[str]:
    """Split a command line into whitespace-separated arguments."""
    return text.split()


def comma_split(text: str) -> list[str]:
    """Split a comma-separated list.

    Empty segments in the middle are kept; a single trailing empty
    segment (and the empty string itself) yields nothing.
    """
    parts = text.split(",")
    if parts[-1] == "":
        parts.pop()
    return parts


def split_lines(text: str) -> list[str]:
    """Split received data into its non-empty newline-separated lines."""
    return [line for line in text.split("\n") if line]