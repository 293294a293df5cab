from __future__ import annotations


class AppError(Exception):
    """Base application error."""

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__(detail)


class NotFoundError(AppError):
    pass


class ForbiddenError(AppError):
    pass


class ConflictError(AppError):
    pass


class ValidationError(AppError):
    pass


class MissingConversationError(ValidationError):
    """A direct send named neither a conversation nor a recipient."""


class PersistenceError(AppError):
    """The backing store is unreachable or rejected the operation."""
