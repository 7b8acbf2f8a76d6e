import logging
from typing import Any, Mapping, Optional, Type

from django.conf import settings
from django.db import IntegrityError, transaction
from django.db.models import Max, Model

from cookbook.exceptions import ConflictError

logger = logging.getLogger(__name__)

DEFAULT_ID_ALLOCATION_ATTEMPTS = 5


class DB_Accessor:
    """Generic data accessor to wrap basic queryset operations."""

    def __init__(self, model: Type[Model]) -> None:
        self.model = model

    def first(self, **lookup: Any) -> Optional[Model]:
        """Return the first object matching the lookup, or None."""
        return self.model.objects.filter(**lookup).first()

    def lock(self, **lookup: Any) -> Optional[Model]:
        """Select the matching row for update; call inside ``transaction.atomic``."""
        return self.model.objects.select_for_update().filter(**lookup).first()

    def exists(self, **lookup: Any) -> bool:
        """Return True when at least one object matches."""
        return self.model.objects.filter(**lookup).exists()

    def count(self, **lookup: Any) -> int:
        """Count objects matching the lookup."""
        return self.model.objects.filter(**lookup).count()

    def create(self, **data: Any) -> Model:
        """Create and return a new object."""
        return self.model.objects.create(**data)

    def update(self, lookup: Mapping[str, Any], **data: Any) -> int:
        """Update objects matching lookup; return count updated."""
        return self.model.objects.filter(**lookup).update(**data)

    def delete(self, **lookup: Any) -> int:
        """Delete objects matching lookup; return count deleted."""
        count, _ = self.model.objects.filter(**lookup).delete()
        return count

    # --- id allocation ---------------------------------------------------
    def next_id(self) -> int:
        """Highest existing primary key + 1."""
        highest = self.model.objects.aggregate(highest=Max("pk"))["highest"]
        return (highest or 0) + 1

    def create_with_next_id(self, *, on_conflict=None, **data: Any) -> Model:
        """
        Insert a row under the next free id, retrying when a concurrent insert
        takes the same id first.

        `on_conflict` is called after a failed attempt; it may raise to stop
        retrying when the IntegrityError was caused by another unique key.
        """
        attempts = getattr(settings, "COOKBOOK_ID_ALLOCATION_ATTEMPTS", DEFAULT_ID_ALLOCATION_ATTEMPTS)
        for attempt in range(1, attempts + 1):
            candidate = self.next_id()
            try:
                with transaction.atomic():
                    return self.model.objects.create(pk=candidate, **data)
            except IntegrityError as error:
                if on_conflict is not None:
                    on_conflict()
                logger.debug(
                    "Attempt %s to insert %s with id %s failed: %s",
                    attempt, self.model.__name__, candidate, error,
                )
        raise ConflictError(
            f"Could not allocate an id for {self.model.__name__} after {attempts} attempts",
            code="id_allocation",
        )
