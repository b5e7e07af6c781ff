from __future__ import annotations


class LibraryError(Exception):
    """Base class for errors reported back to the presentation layer."""

    default_message = "Library error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class ItemNotFound(LibraryError, LookupError):
    default_message = "Invalid Item ID!"


class MemberNotFound(LibraryError, LookupError):
    default_message = "Member not found"


class NoCopiesAvailable(LibraryError):
    default_message = "No available copies left!"


class ItemNotCheckedOut(LibraryError):
    default_message = "This book was not checked out by this member"


class ItemAlreadyCheckedOut(LibraryError):
    """The member already holds this item; use renew instead."""

    default_message = "This item is already checked out by this member"


class InvalidInput(LibraryError, ValueError):
    """A numeric id was required but the text did not parse."""

    default_message = "Invalid input"


class LoadFailed(LibraryError, ValueError):
    default_message = "No items loaded from CSV"
