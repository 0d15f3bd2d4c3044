"""Hosted backend exceptions.

Raised by the backend adapters when the collaborator reports an error.
The Service Layer catches these and turns them into failed results.
"""

from __future__ import annotations


class StorageError(Exception):
    """The hosted backend rejected a row or blob operation."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
