"""
Rockkeep - Error Kinds

Every failure the core can report is one of the kinds below. The core never
prints or logs; it raises one of these and lets the front end decide how to
present it.
"""

from enum import Enum


class ErrorKind(str, Enum):
    INVALID_ARGUMENT = "invalid_argument"
    NOT_FOUND = "not_found"
    DUPLICATE_ENTRY = "duplicate_entry"
    AUTHENTICATION_FAILURE = "authentication_failure"
    MALFORMED_DATA = "malformed_data"
    IO_FAILURE = "io_failure"
    UNEXPECTED = "unexpected"


class VaultError(Exception):
    """Base class for all Rockkeep errors. `kind` tells them apart."""

    kind = ErrorKind.UNEXPECTED

    def __init__(self, detail: str = ""):
        super().__init__(detail)
        self.detail = detail

    def __str__(self) -> str:
        return self.detail


class InvalidArgumentError(VaultError, ValueError):
    """A required string was empty or whitespace, or a value was out of range."""

    kind = ErrorKind.INVALID_ARGUMENT


class NotFoundError(VaultError, KeyError):
    """Service is not in the vault."""

    kind = ErrorKind.NOT_FOUND


class DuplicateEntryError(VaultError):
    """Service already has a stored password (store is insert-only)."""

    kind = ErrorKind.DUPLICATE_ENTRY


class AuthenticationError(VaultError):
    """
    AES-GCM tag check failed.

    Raised for a wrong master password AND for a corrupted or tampered blob;
    the two cases are never told apart.
    """

    kind = ErrorKind.AUTHENTICATION_FAILURE

    def __init__(self, detail: str = "invalid master password"):
        super().__init__(detail)


class MalformedDataError(VaultError):
    kind = ErrorKind.MALFORMED_DATA


class VaultIOError(VaultError, OSError):
    kind = ErrorKind.IO_FAILURE


class UnexpectedError(VaultError):
    kind = ErrorKind.UNEXPECTED
