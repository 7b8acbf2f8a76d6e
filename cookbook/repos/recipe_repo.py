"""Repository helpers and query composition for recipes."""

from decimal import Decimal
from typing import Iterable, List, Optional

from django.db import models
from django.db.models import F, Prefetch, Q, QuerySet
from django.db.models.functions import Lower

from cookbook.db_accessor import DB_Accessor
from cookbook.models import Ingredient, Recipe, Review, ReviewLike


class RecipeSort(models.TextChoices):
    RATING_DESC = "rating_desc", "Rating, highest first"
    DATE_DESC = "date_desc", "Newest first"
    CALORIES_ASC = "calories_asc", "Calories, lowest first"

    @classmethod
    def parse(cls, value) -> "RecipeSort":
        """Map a sort key to a member; unset or unknown keys mean newest first."""
        try:
            return cls(value)
        except ValueError:
            return cls.DATE_DESC


SORT_ORDERINGS = {
    RecipeSort.RATING_DESC: (F("aggregated_rating").desc(nulls_last=True), "-id"),
    RecipeSort.DATE_DESC: (F("date_published").desc(nulls_last=True), "-id"),
    RecipeSort.CALORIES_ASC: (F("calories").asc(nulls_last=True), "-id"),
}


def ingredients_prefetch() -> Prefetch:
    """Prefetch ingredient rows in display order (case-insensitive)."""
    return Prefetch("ingredients", queryset=Ingredient.objects.order_by(Lower("part"), "part"))


class RecipeQuery:
    """
    Structured recipe search: a list of predicates plus one sort key.

    The page query and the count query are both built from `predicates`, so
    they always agree on which recipes match.
    """

    def __init__(self, sort=None) -> None:
        self.predicates: List[Q] = []
        self.sort = RecipeSort.parse(sort)

    def keyword(self, keyword: Optional[str]) -> "RecipeQuery":
        """Case-insensitive match against name or description."""
        if keyword and keyword.strip():
            self.predicates.append(Q(name__icontains=keyword) | Q(description__icontains=keyword))
        return self

    def category(self, category: Optional[str]) -> "RecipeQuery":
        """Exact category match."""
        if category and category.strip():
            self.predicates.append(Q(category=category))
        return self

    def min_rating(self, min_rating) -> "RecipeQuery":
        """Inclusive lower bound on the aggregated rating."""
        if min_rating is not None:
            self.predicates.append(Q(aggregated_rating__gte=Decimal(str(min_rating))))
        return self

    def authored_by(self, author_ids: Iterable[int]) -> "RecipeQuery":
        """Restrict to recipes by the given authors who are still active."""
        self.predicates.append(Q(author_id__in=list(author_ids)) & Q(author__is_deleted=False))
        return self

    def filtered(self) -> QuerySet:
        return Recipe.objects.filter(*self.predicates)

    def count(self) -> int:
        """Number of distinct recipes matching the predicates."""
        return self.filtered().values("id").distinct().count()

    def queryset(self) -> QuerySet:
        """Matching recipes, ordered by the sort key with id as the tie-break."""
        return (
            self.filtered()
            .select_related("author")
            .prefetch_related(ingredients_prefetch())
            .order_by(*SORT_ORDERINGS[self.sort])
        )


class RecipeRepo(DB_Accessor):
    """Repository for recipe rows, their ingredients and cascades."""
    def __init__(self) -> None:
        """Initialise with the Recipe model."""
        super().__init__(Recipe)

    def get_detail(self, recipe_id: int) -> Optional[Recipe]:
        """Recipe with author and ordered ingredients, or None."""
        return (
            self.model.objects.filter(id=recipe_id)
            .select_related("author")
            .prefetch_related(ingredients_prefetch())
            .first()
        )

    def name_by_id(self, recipe_id: int) -> Optional[str]:
        """Recipe name, or None when the recipe does not exist."""
        return self.model.objects.filter(id=recipe_id).values_list("name", flat=True).first()

    def add_ingredients(self, recipe: Recipe, parts: Iterable[str]) -> List[Ingredient]:
        """Store ingredient strings as a set for the recipe."""
        unique_parts = list(dict.fromkeys(parts))
        return Ingredient.objects.bulk_create(
            [Ingredient(recipe=recipe, part=part) for part in unique_parts]
        )

    def delete_cascade(self, recipe_id: int) -> int:
        """Remove review likes, reviews, ingredients and finally the recipe row."""
        ReviewLike.objects.filter(review__recipe_id=recipe_id).delete()
        Review.objects.filter(recipe_id=recipe_id).delete()
        Ingredient.objects.filter(recipe_id=recipe_id).delete()
        return self.delete(id=recipe_id)
