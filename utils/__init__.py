"""Utility modules for the club portal reminder service."""

from .redact import redact, describe_error

__all__ = ["redact", "describe_error"]
