"""Model for the ingredient strings of a recipe."""

from django.db import models
from .recipe import Recipe


class Ingredient(models.Model):
    """One ingredient line; a recipe's ingredients form a set."""
    recipe = models.ForeignKey(
        Recipe,
        on_delete=models.CASCADE,
        db_column="recipe_id",
        related_name="ingredients",
    )
    part = models.CharField(max_length=500)

    class Meta:
        """Uniqueness of an ingredient within a recipe."""
        db_table = "recipe_ingredients"
        constraints = [
            models.UniqueConstraint(fields=["recipe", "part"], name="uniq_recipe_ingredient_part"),
        ]

    def __str__(self):
        """Readable representation for admin/debugging."""
        return f"{self.recipe_id}: {self.part}"
