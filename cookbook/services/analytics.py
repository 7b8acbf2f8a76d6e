"""Read-only aggregate queries over recipes and users."""

from django.db.models import Count, F, FloatField
from django.db.models.functions import Cast

from cookbook.models import Recipe, User


class AnalyticsService:
    """Pure functions of the current data; nothing here writes."""

    def closest_calorie_pair(self):
        """
        The two recipes with known calories whose values are closest.

        Ties go to the smallest (lower id, higher id) pair. Returns None with
        fewer than two qualifying recipes.
        """
        rows = list(
            Recipe.objects.filter(calories__isnull=False)
            .order_by("calories", "id")
            .values_list("id", "calories")
        )
        best = None
        for (id_a, cal_a), (id_b, cal_b) in zip(rows, rows[1:]):
            low, high = sorted((id_a, id_b))
            key = (abs(cal_b - cal_a), low, high)
            if best is None or key < best[0]:
                best = (key, {id_a: cal_a, id_b: cal_b})
        if best is None:
            return None

        (difference, low, high), calories = best
        return {
            "recipe_a": low,
            "recipe_b": high,
            "calories_a": calories[low],
            "calories_b": calories[high],
            "difference": difference,
        }

    def top_complex_recipes(self, limit=3):
        """Recipes with the most ingredient rows, ties by ascending id."""
        rows = (
            Recipe.objects.annotate(ingredient_count=Count("ingredients"))
            .filter(ingredient_count__gt=0)
            .order_by("-ingredient_count", "id")
            .values("id", "name", "ingredient_count")[:limit]
        )
        return [
            {"recipe_id": row["id"], "name": row["name"], "ingredient_count": row["ingredient_count"]}
            for row in rows
        ]

    def highest_follow_ratio(self):
        """Active user with the best follower/following ratio, or None when nobody follows anyone."""
        row = (
            User.objects.active()
            .filter(following_count__gt=0)
            .annotate(ratio=Cast("follower_count", FloatField()) / Cast(F("following_count"), FloatField()))
            .order_by("-ratio", "id")
            .values("id", "name", "ratio")
            .first()
        )
        if row is None:
            return None
        return {"user_id": row["id"], "name": row["name"], "ratio": row["ratio"]}
