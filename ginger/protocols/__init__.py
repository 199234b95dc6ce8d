"""Ginger protocols."""

from ginger.protocols.actor import Actor, display_name

__all__ = [
    "Actor",
    "display_name",
]
