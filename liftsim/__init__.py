"""Elevator simulation: a TCP server running one elevator, and a client that replays ride requests."""

__version__ = "0.1.0"
__all__ = ["constants", "protocol", "elevator", "server", "client"]