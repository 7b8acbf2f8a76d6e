"""Error taxonomy raised by the cookbook services.

Each class also derives from the matching Django exception so callers that
already handle ``PermissionDenied`` or ``ObjectDoesNotExist`` keep working.
"""

from django.core import exceptions as django_exceptions


class CookbookError(Exception):
    """Base class for every error the core raises on purpose."""


class ValidationError(CookbookError, django_exceptions.ValidationError):
    """Malformed or out-of-range input, rejected before any write."""


class ConflictError(ValidationError):
    """A unique key is already taken and the duplicate is itself invalid."""


class FormatError(ValidationError):
    """Duration text that no parser accepts."""

    def __init__(self, text, message=None):
        self.text = text
        super().__init__(message or f"text cannot be parsed to a duration: {text!r}", code="format")


class AuthError(CookbookError, django_exceptions.PermissionDenied):
    """Missing or wrong credentials, or an actor without the right to act."""


class NotFoundError(CookbookError, django_exceptions.ObjectDoesNotExist):
    """Referenced entity is absent (or soft-deleted)."""
