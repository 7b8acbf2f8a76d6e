import logging

from django.db import transaction

from cookbook.authentication import resolve_actor
from cookbook.exceptions import AuthError
from cookbook.repos.follow_repo import FollowRepo
from cookbook.repos.user_repo import UserRepo

logger = logging.getLogger(__name__)


class FollowService:
    """
    Follow/unfollow on behalf of an authenticated actor.

    Each change locks both user rows (ascending id) and adjusts the actor's
    following count and the target's follower count in the same transaction.
    The returned ``now_following`` flag says which action took place.
    """

    def __init__(self, auth, *, users=None, follows=None):
        self.auth = auth
        self.users = users or UserRepo()
        self.follows = follows or FollowRepo()

    def _lock_pair(self, target_id):
        actor = resolve_actor(self.auth)
        if target_id == actor.id:
            raise AuthError("Users cannot follow themselves")

        locked = {user.id: user for user in self.users.lock_many([actor.id, target_id])}
        target = locked.get(target_id)
        if target is None or target.is_deleted:
            raise AuthError("Followee does not exist or is inactive")
        if locked[actor.id].is_deleted:
            raise AuthError("Follower is invalid or inactive")
        return actor, target

    def _add_edge(self, actor, target):
        if self.follows.follow(follower_id=actor.id, followee_id=target.id):
            self.users.shift_counters(follower_id=actor.id, followee_id=target.id, delta=1)
            logger.info("User %s followed user %s", actor.id, target.id)
        else:
            logger.debug("Follow %s -> %s already present", actor.id, target.id)
        return {"status": "following", "now_following": True}

    def _remove_edge(self, actor, target):
        if self.follows.unfollow(follower_id=actor.id, followee_id=target.id):
            self.users.shift_counters(follower_id=actor.id, followee_id=target.id, delta=-1)
            logger.info("User %s unfollowed user %s", actor.id, target.id)
            return {"status": "unfollowed", "now_following": False}
        return {"status": "not_following", "now_following": False}

    @transaction.atomic
    def toggle_follow(self, target_id):
        """Unfollow when the edge exists, follow otherwise."""
        actor, target = self._lock_pair(target_id)
        if self.follows.is_following(follower_id=actor.id, followee_id=target.id):
            return self._remove_edge(actor, target)
        return self._add_edge(actor, target)

    @transaction.atomic
    def follow(self, target_id):
        """Follow the target; a no-op when already following."""
        actor, target = self._lock_pair(target_id)
        return self._add_edge(actor, target)

    @transaction.atomic
    def unfollow(self, target_id):
        """Unfollow the target; a no-op when not following."""
        actor, target = self._lock_pair(target_id)
        return self._remove_edge(actor, target)

    def is_following(self, target_id):
        actor = resolve_actor(self.auth)
        return self.follows.is_following(follower_id=actor.id, followee_id=target_id)
