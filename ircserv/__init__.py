"""A small IRC server with channels, modes, topics, kicks and invites."""

__version__ = "0.1.0"
__all__ = ["__version__"]