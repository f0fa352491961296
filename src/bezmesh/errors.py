"""Exceptions raised while reading scenes and configuration."""

from __future__ import annotations

from typing import Optional


class PatchFormatError(ValueError):
    """Malformed textual patch or triangle data.

    ``expected`` and ``actual`` hold the element counts involved when the
    error is a count mismatch; ``line`` is the 1-based line number within the
    parsed text when known.
    """

    def __init__(self, message: str, *, expected: Optional[int] = None,
                 actual: Optional[int] = None, line: Optional[int] = None):
        super().__init__(message)
        self.expected = expected
        self.actual = actual
        self.line = line


class ConfigError(ValueError):
    """Invalid tessellation configuration."""

    def __init__(self, message: str, details=None):
        super().__init__(message)
        self.details = details or {}


__all__ = ["PatchFormatError", "ConfigError"]
