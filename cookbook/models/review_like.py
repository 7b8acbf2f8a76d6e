"""Model representing a user's like on a review."""

from django.conf import settings
from django.db import models
from .review import Review


class ReviewLike(models.Model):
    """User like on a review."""
    review = models.ForeignKey(
        Review,
        on_delete=models.CASCADE,
        db_column="review_id",
        related_name="likes",
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        db_column="user_id",
        related_name="review_likes",
    )

    class Meta:
        """Enforce one like per user/review pair."""
        db_table = "review_likes"
        constraints = [
            models.UniqueConstraint(fields=["review", "user"], name="uniq_review_like_pair"),
        ]

    def __str__(self):
        """Readable representation for admin/debugging."""
        return f"{self.user_id} → {self.review_id}"
