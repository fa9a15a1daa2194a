"""Ambient runtime helpers: context, errors, logging, traversal and file io."""

from .context import RunContext
from .errors import ScriptError

__all__ = ["RunContext", "ScriptError"]
