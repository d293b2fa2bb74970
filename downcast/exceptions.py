"""Exceptions raised by downcast."""

from __future__ import annotations


class DowncastError(Exception):
    """Base class for downcast errors."""


class InvalidVariable(DowncastError, ValueError):
    """A plot was requested for a variable outside the supported set."""

    def __init__(self, name, supported: list[str]):
        self.name = name
        self.supported = supported
        super().__init__(f"Unsupported variable {name!r}; expected one of: {', '.join(supported)}")
