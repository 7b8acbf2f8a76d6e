"""Recipe lifecycle and search."""

import logging
from decimal import Decimal, InvalidOperation

from django.db import transaction
from django.utils import timezone

from cookbook.authentication import resolve_actor
from cookbook.durations import (
    ZERO,
    format_duration,
    parse_duration_lenient,
    parse_duration_or_zero,
)
from cookbook.exceptions import AuthError, NotFoundError, ValidationError
from cookbook.pagination import paginate, validate_paging
from cookbook.repos.recipe_repo import RecipeQuery, RecipeRepo
from cookbook.serializers import RecipeWriteSerializer

logger = logging.getLogger(__name__)

NUTRITION_FIELDS = (
    "calories",
    "fat_content",
    "saturated_fat_content",
    "cholesterol_content",
    "sodium_content",
    "carbohydrate_content",
    "fiber_content",
    "sugar_content",
    "protein_content",
)


def _check_recipe_id(recipe_id):
    if isinstance(recipe_id, bool) or not isinstance(recipe_id, int) or recipe_id <= 0:
        raise ValidationError("Recipe id must be a positive integer", code="id")
    return recipe_id


def _flatten_errors(detail):
    if isinstance(detail, dict):
        return [message for value in detail.values() for message in _flatten_errors(value)]
    if isinstance(detail, (list, tuple)):
        return [message for value in detail for message in _flatten_errors(value)]
    return [str(detail)]


def _is_blank(value):
    return value is None or not str(value).strip()


def _parse_new_duration(value, field):
    parsed = parse_duration_lenient(value)
    if parsed < ZERO:
        raise ValidationError(f"{field} cannot be negative", code=field)
    return parsed


def _total_time(cook, prep):
    try:
        return cook + prep
    except OverflowError:
        raise ValidationError("Total time is out of range", code="total_time")


class RecipeService:
    """Encapsulate recipe creation, lookup, deletion, timing updates and search."""

    def __init__(self, *, recipes=None):
        self.recipes = recipes or RecipeRepo()

    @transaction.atomic
    def create(self, auth, data):
        """Validate `data`, store the recipe with its ingredient set and return the new id."""
        actor = resolve_actor(auth)
        serializer = RecipeWriteSerializer(data=dict(data or {}))
        if not serializer.is_valid():
            raise ValidationError(
                {field: _flatten_errors(detail) for field, detail in serializer.errors.items()}
            )
        cleaned = serializer.validated_data

        cook = cleaned.get("cook_time")
        prep = cleaned.get("prep_time")
        total = None
        if cook is not None or prep is not None:
            total = _total_time(cook or ZERO, prep or ZERO)

        fields = {name: cleaned.get(name) for name in NUTRITION_FIELDS}
        recipe = self.recipes.create_with_next_id(
            author=actor,
            name=cleaned["name"],
            description=cleaned.get("description") or "",
            category=cleaned.get("category") or None,
            cook_time=format_duration(cook) if cook is not None else None,
            prep_time=format_duration(prep) if prep is not None else None,
            total_time=format_duration(total) if total is not None else None,
            date_published=cleaned.get("date_published") or timezone.now(),
            recipe_servings=cleaned.get("recipe_servings"),
            recipe_yield=cleaned.get("recipe_yield") or None,
            **fields,
        )
        self.recipes.add_ingredients(recipe, cleaned.get("ingredients") or [])
        logger.info("Recipe %s created by user %s", recipe.id, actor.id)
        return recipe.id

    def get_by_id(self, recipe_id):
        """Recipe with author name and ordered ingredients, or None."""
        return self.recipes.get_detail(_check_recipe_id(recipe_id))

    def get_name_by_id(self, recipe_id):
        return self.recipes.name_by_id(_check_recipe_id(recipe_id))

    @transaction.atomic
    def delete(self, auth, recipe_id):
        """Delete the actor's recipe together with its reviews, likes and ingredients."""
        actor = resolve_actor(auth)
        recipe = self.recipes.lock(id=recipe_id)
        if recipe is None:
            raise NotFoundError(f"Recipe {recipe_id} does not exist")
        if recipe.author_id != actor.id:
            raise AuthError("Only the author can delete this recipe")

        self.recipes.delete_cascade(recipe.id)
        logger.info("Recipe %s deleted by user %s", recipe_id, actor.id)
        return True

    @transaction.atomic
    def update_times(self, auth, recipe_id, cook_time=None, prep_time=None):
        """
        Change cook and/or prep time and rewrite the total in one statement.

        Blank or missing values leave that field as stored; when both are
        blank nothing is written and None is returned. Authorship is checked
        before new values go through the raising parser, and a bad value
        aborts before any write. Stored values that cannot be parsed count
        as zero.
        """
        actor = resolve_actor(auth)
        if _is_blank(cook_time) and _is_blank(prep_time):
            return None

        recipe = self.recipes.lock(id=recipe_id)
        if recipe is None:
            raise NotFoundError(f"Recipe {recipe_id} does not exist")
        if recipe.author_id != actor.id:
            raise AuthError("Only the author can change recipe times")

        new_cook = None if _is_blank(cook_time) else _parse_new_duration(cook_time, "cook_time")
        new_prep = None if _is_blank(prep_time) else _parse_new_duration(prep_time, "prep_time")

        changes = {}
        if new_cook is not None:
            changes["cook_time"] = format_duration(new_cook)
        else:
            new_cook = parse_duration_or_zero(recipe.cook_time)
        if new_prep is not None:
            changes["prep_time"] = format_duration(new_prep)
        else:
            new_prep = parse_duration_or_zero(recipe.prep_time)
        changes["total_time"] = format_duration(_total_time(new_cook, new_prep))

        self.recipes.update({"id": recipe.id}, **changes)
        logger.info("Recipe %s times updated: %s", recipe.id, changes)
        return self.recipes.get_detail(recipe.id)

    def search(self, keyword=None, category=None, min_rating=None, page=1, size=10, sort=None):
        """
        Filter, sort and paginate recipes.

        Paging outside page >= 1 / size > 0 is rejected. The total comes from
        the same predicates as the page and counts each recipe once.
        """
        page, size = validate_paging(page, size)
        if min_rating is not None and not _is_blank(min_rating):
            try:
                min_rating = Decimal(str(min_rating).strip())
            except InvalidOperation:
                raise ValidationError("Minimum rating must be a number", code="min_rating")
            if not min_rating.is_finite():
                raise ValidationError("Minimum rating must be a number", code="min_rating")
        else:
            min_rating = None

        query = RecipeQuery(sort).keyword(keyword).category(category).min_rating(min_rating)
        return paginate(query.queryset(), page, size, total=query.count())
