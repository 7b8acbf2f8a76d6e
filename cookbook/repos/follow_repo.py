"""Repository helpers for follow edges."""

from typing import List, Set

from django.db import IntegrityError, transaction

from cookbook.db_accessor import DB_Accessor
from cookbook.models import Follow


class FollowRepo(DB_Accessor):
    """Repository wrapper for follow edges."""
    def __init__(self) -> None:
        """Initialise with the Follow model."""
        super().__init__(Follow)

    def is_following(self, *, follower_id: int, followee_id: int) -> bool:
        """Return True if follower_id follows followee_id."""
        return self.exists(follower_id=follower_id, followee_id=followee_id)

    def follower_ids(self, user_id: int) -> List[int]:
        """Ids of users following `user_id`, ascending."""
        return list(
            self.model.objects.filter(followee_id=user_id)
            .order_by("follower_id")
            .values_list("follower_id", flat=True)
        )

    def following_ids(self, user_id: int) -> List[int]:
        """Ids of users `user_id` follows, ascending."""
        return list(
            self.model.objects.filter(follower_id=user_id)
            .order_by("followee_id")
            .values_list("followee_id", flat=True)
        )

    def neighbours(self, user_id: int) -> Set[int]:
        """Every user connected to `user_id` by an edge in either direction."""
        return set(self.follower_ids(user_id)) | set(self.following_ids(user_id))

    def follow(self, *, follower_id: int, followee_id: int) -> bool:
        """Insert an edge; returns False when it already existed (including a lost insert race)."""
        try:
            with transaction.atomic():
                self.create(follower_id=follower_id, followee_id=followee_id)
        except IntegrityError:
            return False
        return True

    def unfollow(self, *, follower_id: int, followee_id: int) -> bool:
        """Remove an edge; returns False when there was none."""
        return self.delete(follower_id=follower_id, followee_id=followee_id) > 0

    def purge(self, user_id: int) -> int:
        """Delete every edge touching `user_id`."""
        outbound = self.delete(follower_id=user_id)
        inbound = self.delete(followee_id=user_id)
        return outbound + inbound
