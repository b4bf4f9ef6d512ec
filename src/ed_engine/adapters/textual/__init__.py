"""Textual front end for the ed engine."""

from .controller import QueueLineSource, TextualEdAdapter, TextualUIHooks

__all__ = ["QueueLineSource", "TextualEdAdapter", "TextualUIHooks"]
