"""Model representing follower→followee relationships."""

from __future__ import annotations
from django.conf import settings
from django.db import models
from django.db.models import Q, F


class Follow(models.Model):
    """Directed edge: `follower` follows `followee`."""
    follower = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="following_edges",   # user.following_edges -> rows this user created (outbound)
        db_column="follower_id",
    )
    followee = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="follower_edges",    # user.follower_edges -> rows pointing to this user (inbound)
        db_column="followee_id",
    )

    class Meta:
        """DB metadata and constraints for follow edges."""
        db_table = "user_follows"
        constraints = [
            models.UniqueConstraint(fields=["follower", "followee"], name="uniq_user_follows_pair"),
            models.CheckConstraint(condition=~Q(follower=F("followee")), name="chk_user_follows_not_self"),
        ]
        indexes = [
            models.Index(fields=["follower"], name="user_follows_follower_idx"),
            models.Index(fields=["followee"], name="user_follows_followee_idx"),
        ]

    def __str__(self) -> str:
        """Readable representation for admin/debugging."""
        return f"Follow(follower={self.follower_id}, followee={self.followee_id})"
