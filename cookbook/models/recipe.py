"""
Recipe model.

- `author` links the recipe to the user who published it; users are never
  hard-deleted, so the reference is protected.
- `cook_time` / `prep_time` / `total_time` hold canonical ISO-8601 duration
  text. `total_time` is always written as cook + prep by the recipe service.
- `aggregated_rating` and `review_count` are cached from the reviews table and
  recomputed in the same transaction as every review mutation.
"""

from django.conf import settings
from django.db import models
from django.utils import timezone


class Recipe(models.Model):
    id = models.BigIntegerField(primary_key=True)

    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="recipes",
        db_column="author_id",
    )

    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    category = models.CharField(max_length=255, blank=True, null=True)

    # Time fields (ISO-8601 text)
    cook_time = models.CharField(max_length=64, blank=True, null=True)
    prep_time = models.CharField(max_length=64, blank=True, null=True)
    total_time = models.CharField(max_length=64, blank=True, null=True)

    date_published = models.DateTimeField(default=timezone.now)

    # derived from reviews
    aggregated_rating = models.DecimalField(max_digits=3, decimal_places=2, null=True, blank=True)
    review_count = models.PositiveIntegerField(default=0)

    # nutrition
    calories = models.FloatField(null=True, blank=True)
    fat_content = models.FloatField(null=True, blank=True)
    saturated_fat_content = models.FloatField(null=True, blank=True)
    cholesterol_content = models.FloatField(null=True, blank=True)
    sodium_content = models.FloatField(null=True, blank=True)
    carbohydrate_content = models.FloatField(null=True, blank=True)
    fiber_content = models.FloatField(null=True, blank=True)
    sugar_content = models.FloatField(null=True, blank=True)
    protein_content = models.FloatField(null=True, blank=True)
    recipe_servings = models.PositiveIntegerField(null=True, blank=True)
    recipe_yield = models.CharField(max_length=255, blank=True, null=True)

    class Meta:
        db_table = "recipes"
        indexes = [
            models.Index(fields=["author"], name="recipes_author_idx"),
            models.Index(fields=["category"], name="recipes_category_idx"),
            models.Index(fields=["-date_published"], name="recipes_published_idx"),
        ]

    def __str__(self):
        return self.name

    @property
    def author_name(self):
        return self.author.name

    @property
    def ingredient_parts(self):
        """Ingredient strings sorted case-insensitively."""
        return sorted((ing.part for ing in self.ingredients.all()), key=lambda part: (part.lower(), part))
