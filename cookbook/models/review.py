"""Model for user reviews of recipes."""

from django.conf import settings
from django.db import models
from django.db.models import Q
from django.utils import timezone

from .recipe import Recipe


class Review(models.Model):
    """Rated review; at most one per (author, recipe)."""
    recipe = models.ForeignKey(
        Recipe,
        on_delete=models.CASCADE,
        db_column="recipe_id",
        related_name="reviews",
    )
    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        db_column="author_id",
        related_name="reviews",
    )

    rating = models.PositiveSmallIntegerField()
    text = models.TextField(blank=True, default="")

    date_submitted = models.DateTimeField(default=timezone.now)
    date_modified = models.DateTimeField(default=timezone.now)

    class Meta:
        """One review per user per recipe, rating within 1..5."""
        db_table = "reviews"
        constraints = [
            models.UniqueConstraint(fields=["recipe", "author"], name="uniq_review_recipe_author"),
            models.CheckConstraint(condition=Q(rating__gte=1, rating__lte=5), name="chk_review_rating_range"),
        ]

    def __str__(self):
        """Readable identifier for admin/debugging."""
        return f"Review {self.pk} by {self.author_id} on {self.recipe_id}"

    @property
    def liker_ids(self):
        """Ids of users who liked this review, ascending."""
        return sorted(like.user_id for like in self.likes.all())

    @property
    def author_name(self):
        return self.author.name
