"""Repository helpers for user lookups and counter maintenance."""

from typing import Iterable, List, Optional

from django.db.models import F, IntegerField, Value
from django.db.models.functions import Greatest

from cookbook.db_accessor import DB_Accessor
from cookbook.models import Follow, User


class UserRepo(DB_Accessor):
    """Repository for user queries and cached follow counters."""
    def __init__(self) -> None:
        """Initialise with the User model."""
        super().__init__(User)

    def get_by_id(self, user_id: int) -> Optional[User]:
        """Return a user by id, or None."""
        return self.first(id=user_id)

    def name_taken(self, name: str) -> bool:
        """Case-sensitive check for an existing display name."""
        return self.exists(name=name)

    def lock_many(self, user_ids: Iterable[int]) -> List[User]:
        """Lock user rows in ascending id order to keep lock acquisition consistent."""
        return list(
            self.model.objects.select_for_update().filter(id__in=set(user_ids)).order_by("id")
        )

    def shift_counters(self, *, follower_id: int, followee_id: int, delta: int) -> None:
        """Add `delta` to the follower's following count and the followee's follower count, floored at zero."""
        self.model.objects.filter(id=follower_id).update(
            following_count=Greatest(F("following_count") + delta, Value(0), output_field=IntegerField())
        )
        self.model.objects.filter(id=followee_id).update(
            follower_count=Greatest(F("follower_count") + delta, Value(0), output_field=IntegerField())
        )

    def recount(self, user_ids: Iterable[int]) -> None:
        """Recompute cached counters from live follow edges."""
        for user_id in sorted(set(user_ids)):
            followers = Follow.objects.filter(followee_id=user_id).count()
            following = Follow.objects.filter(follower_id=user_id).count()
            self.model.objects.filter(id=user_id).update(
                follower_count=followers, following_count=following
            )
