"""Repository helpers for reviews, their likes and rating statistics."""

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Tuple

from django.db import IntegrityError, models, transaction
from django.db.models import Avg, Count, Prefetch, QuerySet

from cookbook.db_accessor import DB_Accessor
from cookbook.models import Review, ReviewLike

RATING_QUANTUM = Decimal("0.01")


class ReviewSort(models.TextChoices):
    LIKES_DESC = "likes_desc", "Most liked first"
    DATE_DESC = "date_desc", "Recently modified first"

    @classmethod
    def parse(cls, value) -> "ReviewSort":
        """Map a sort key to a member; unset or unknown keys mean recently modified first."""
        try:
            return cls(value)
        except ValueError:
            return cls.DATE_DESC


SORT_ORDERINGS = {
    ReviewSort.LIKES_DESC: ("-like_count", "-date_modified", "-id"),
    ReviewSort.DATE_DESC: ("-date_modified", "-id"),
}


class ReviewRepo(DB_Accessor):
    """Repository for review rows and derived rating statistics."""
    def __init__(self) -> None:
        """Initialise with the Review model."""
        super().__init__(Review)

    def has_reviewed(self, *, author_id: int, recipe_id: int) -> bool:
        """Return True when the user already reviewed the recipe."""
        return self.exists(author_id=author_id, recipe_id=recipe_id)

    def rating_stats(self, recipe_id: int) -> Tuple[int, Optional[Decimal]]:
        """Return (review count, mean rating rounded to 2 places or None)."""
        stats = self.model.objects.filter(recipe_id=recipe_id).aggregate(
            count=Count("id"), average=Avg("rating")
        )
        count = stats["count"] or 0
        if not count or stats["average"] is None:
            return 0, None
        average = Decimal(str(stats["average"])).quantize(RATING_QUANTUM, rounding=ROUND_HALF_UP)
        return count, average

    def visible_for_recipe(self, recipe_id: int) -> QuerySet:
        """Reviews of the recipe whose authors are still active."""
        return self.model.objects.filter(recipe_id=recipe_id, author__is_deleted=False)

    def listing(self, recipe_id: int, sort=None) -> QuerySet:
        """Visible reviews annotated with like counts, likers prefetched, in `sort` order."""
        sort = ReviewSort.parse(sort)
        return (
            self.visible_for_recipe(recipe_id)
            .select_related("author")
            .annotate(like_count=Count("likes", distinct=True))
            .prefetch_related(Prefetch("likes", queryset=ReviewLike.objects.order_by("user_id")))
            .order_by(*SORT_ORDERINGS[sort])
        )


class ReviewLikeRepo(DB_Accessor):
    """Repository for review likes."""
    def __init__(self) -> None:
        """Initialise with the ReviewLike model."""
        super().__init__(ReviewLike)

    def like(self, *, review_id: int, user_id: int) -> bool:
        """Insert a like; returns False when it already existed (including a lost insert race)."""
        if self.exists(review_id=review_id, user_id=user_id):
            return False
        try:
            with transaction.atomic():
                self.create(review_id=review_id, user_id=user_id)
        except IntegrityError:
            return False
        return True

    def unlike(self, *, review_id: int, user_id: int) -> bool:
        """Remove a like; returns False when there was none."""
        return self.delete(review_id=review_id, user_id=user_id) > 0

    def count_for(self, review_id: int) -> int:
        """Fresh like total for the review."""
        return self.count(review_id=review_id)
