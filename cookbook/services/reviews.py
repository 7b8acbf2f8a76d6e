"""Reviews, review likes and the recipe rating aggregate they feed."""

import logging

from django.db import IntegrityError, transaction
from django.utils import timezone

from cookbook.authentication import resolve_actor
from cookbook.exceptions import AuthError, ConflictError, NotFoundError, ValidationError
from cookbook.pagination import Page, paginate, validate_paging
from cookbook.repos.recipe_repo import RecipeRepo
from cookbook.repos.review_repo import ReviewLikeRepo, ReviewRepo

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5


def clean_rating(rating):
    """Return `rating` when it is an int within 1..5, else raise ValidationError."""
    if isinstance(rating, bool) or not isinstance(rating, int) or not MIN_RATING <= rating <= MAX_RATING:
        raise ValidationError(f"Rating must be an integer between {MIN_RATING} and {MAX_RATING}", code="rating")
    return rating


class ReviewService:
    """
    Review lifecycle for recipes.

    Every mutation locks the recipe row first, then writes, then recomputes
    `review_count` and `aggregated_rating` from the reviews table before the
    transaction commits.
    """

    def __init__(self, *, recipes=None, reviews=None, likes=None):
        self.recipes = recipes or RecipeRepo()
        self.reviews = reviews or ReviewRepo()
        self.likes = likes or ReviewLikeRepo()

    # --- aggregate ---------------------------------------------------------
    def _recompute(self, recipe_id):
        count, average = self.reviews.rating_stats(recipe_id)
        self.recipes.update({"id": recipe_id}, review_count=count, aggregated_rating=average)
        logger.debug("Recipe %s aggregate: %s reviews, rating %s", recipe_id, count, average)

    def _lock_recipe(self, recipe_id):
        recipe = self.recipes.lock(id=recipe_id)
        if recipe is None:
            raise NotFoundError(f"Recipe {recipe_id} does not exist")
        return recipe

    def _own_review(self, actor, recipe_id, review_id):
        review = self.reviews.first(id=review_id)
        if review is None or review.recipe_id != recipe_id:
            raise NotFoundError(f"Review {review_id} does not exist for recipe {recipe_id}")
        if review.author_id != actor.id:
            raise AuthError("Only the author can change this review")
        return review

    # --- mutations ---------------------------------------------------------
    @transaction.atomic
    def add_review(self, auth, recipe_id, rating, text):
        """Add the actor's single review of a recipe and return its id."""
        rating = clean_rating(rating)
        actor = resolve_actor(auth)
        recipe = self._lock_recipe(recipe_id)
        if self.reviews.has_reviewed(author_id=actor.id, recipe_id=recipe.id):
            raise ConflictError("User has already reviewed this recipe", code="duplicate_review")

        now = timezone.now()
        try:
            with transaction.atomic():
                review = self.reviews.create(
                    recipe=recipe,
                    author=actor,
                    rating=rating,
                    text=text or "",
                    date_submitted=now,
                    date_modified=now,
                )
        except IntegrityError:
            raise ConflictError("User has already reviewed this recipe", code="duplicate_review")

        self._recompute(recipe.id)
        logger.info("Review %s added to recipe %s by user %s", review.id, recipe.id, actor.id)
        return review.id

    @transaction.atomic
    def edit_review(self, auth, recipe_id, review_id, rating, text):
        rating = clean_rating(rating)
        actor = resolve_actor(auth)
        recipe = self._lock_recipe(recipe_id)
        review = self._own_review(actor, recipe.id, review_id)

        self.reviews.update(
            {"id": review.id}, rating=rating, text=text or "", date_modified=timezone.now()
        )
        self._recompute(recipe.id)
        logger.info("Review %s edited by user %s", review.id, actor.id)
        return True

    @transaction.atomic
    def delete_review(self, auth, recipe_id, review_id):
        """Delete the actor's review and its likes, then refresh the aggregate."""
        actor = resolve_actor(auth)
        recipe = self._lock_recipe(recipe_id)
        review = self._own_review(actor, recipe.id, review_id)

        self.likes.delete(review_id=review.id)
        self.reviews.delete(id=review.id)
        self._recompute(recipe.id)
        logger.info("Review %s deleted by user %s", review_id, actor.id)
        return True

    @transaction.atomic
    def like_review(self, auth, review_id):
        """Like a review written by someone else; returns the current like total."""
        actor = resolve_actor(auth)
        review = self.reviews.first(id=review_id)
        if review is None:
            raise NotFoundError(f"Review {review_id} does not exist")
        if review.author_id == actor.id:
            raise AuthError("Users cannot like their own review")

        if self.likes.like(review_id=review.id, user_id=actor.id):
            logger.info("User %s liked review %s", actor.id, review.id)
        else:
            logger.debug("Like of review %s by user %s already present", review.id, actor.id)
        return self.likes.count_for(review.id)

    @transaction.atomic
    def unlike_review(self, auth, review_id):
        """Remove the actor's like; returns the current like total."""
        actor = resolve_actor(auth)
        if not self.reviews.exists(id=review_id):
            raise NotFoundError(f"Review {review_id} does not exist")

        if self.likes.unlike(review_id=review_id, user_id=actor.id):
            logger.info("User %s unliked review %s", actor.id, review_id)
        return self.likes.count_for(review_id)

    # --- reads -------------------------------------------------------------
    def list_by_recipe(self, recipe_id, page=1, size=10, sort=None):
        """
        Page through a recipe's reviews.

        Reviews by soft-deleted authors are left out. Each item carries
        `like_count`, `liker_ids` and `author_name`. A missing recipe gives an
        empty page.
        """
        page, size = validate_paging(page, size)
        if not self.recipes.exists(id=recipe_id):
            return Page(items=[], page=page, size=size, total=0)
        total = self.reviews.visible_for_recipe(recipe_id).count()
        return paginate(self.reviews.listing(recipe_id, sort), page, size, total=total)

    @transaction.atomic
    def refresh_aggregated_rating(self, recipe_id):
        """Recompute the cached rating of one recipe and return the reloaded recipe."""
        recipe = self._lock_recipe(recipe_id)
        self._recompute(recipe.id)
        return self.recipes.get_detail(recipe.id)
