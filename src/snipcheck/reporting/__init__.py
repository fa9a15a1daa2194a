"""Presentation of tree reports as JSON payloads and console text."""

from .payload import tree_payload
from .text import render_text

__all__ = ["render_text", "tree_payload"]
