"""Output contracts for snipcheck payloads."""

from .schema.validate import validate

__all__ = ["validate"]
