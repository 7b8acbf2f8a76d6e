from decimal import Decimal
from unittest.mock import patch

from django.db import IntegrityError
from django.test import TestCase

from cookbook.authentication import AuthInfo
from cookbook.exceptions import AuthError, ConflictError, NotFoundError, ValidationError
from cookbook.models import Review, ReviewLike
from cookbook.services import AccountService, ReviewService
from cookbook.tests.helpers import auth_for, make_recipe, make_user


class ReviewAggregateTests(TestCase):

    def setUp(self):
        self.service = ReviewService()
        self.recipe = make_recipe(name="Risotto")
        self.u = make_user(name="u")
        self.v = make_user(name="v")

    def _recipe(self):
        self.recipe.refresh_from_db()
        return self.recipe

    def test_add_then_delete_recomputes(self):
        self.assertIsNone(self._recipe().aggregated_rating)
        self.assertEqual(self._recipe().review_count, 0)

        u_review = self.service.add_review(auth_for(self.u), self.recipe.id, 4, "good")
        self.service.add_review(auth_for(self.v), self.recipe.id, 2, "meh")
        self.assertEqual(self._recipe().review_count, 2)
        self.assertEqual(self._recipe().aggregated_rating, Decimal("3.00"))

        self.service.delete_review(auth_for(self.u), self.recipe.id, u_review)
        self.assertEqual(self._recipe().review_count, 1)
        self.assertEqual(self._recipe().aggregated_rating, Decimal("2.00"))

    def test_deleting_last_review_clears_rating(self):
        review_id = self.service.add_review(auth_for(self.u), self.recipe.id, 5, "")
        self.service.delete_review(auth_for(self.u), self.recipe.id, review_id)
        self.assertIsNone(self._recipe().aggregated_rating)
        self.assertEqual(self._recipe().review_count, 0)

    def test_add_stamps_times_identically(self):
        review = Review.objects.get(id=self.service.add_review(auth_for(self.u), self.recipe.id, 3, "ok"))
        self.assertEqual(review.date_submitted, review.date_modified)

    def test_edit_recomputes(self):
        review_id = self.service.add_review(auth_for(self.u), self.recipe.id, 1, "bad")
        self.service.edit_review(auth_for(self.u), self.recipe.id, review_id, 5, "better now")
        review = Review.objects.get(id=review_id)
        self.assertEqual((review.rating, review.text), (5, "better now"))
        self.assertGreaterEqual(review.date_modified, review.date_submitted)
        self.assertEqual(self._recipe().aggregated_rating, Decimal("5.00"))

    def test_refresh_aggregated_rating_repairs_cache(self):
        Review.objects.create(recipe=self.recipe, author=self.u, rating=4)
        recipe = self.service.refresh_aggregated_rating(self.recipe.id)
        self.assertEqual(recipe.aggregated_rating, Decimal("4.00"))
        self.assertEqual(recipe.review_count, 1)

    def test_refresh_missing_recipe(self):
        with self.assertRaises(NotFoundError):
            self.service.refresh_aggregated_rating(999)


class ReviewValidationTests(TestCase):

    def setUp(self):
        self.service = ReviewService()
        self.recipe = make_recipe(name="Risotto")
        self.u = make_user(name="u")
        self.v = make_user(name="v")

    def test_rating_out_of_range(self):
        for rating in (0, 6, -1, 2.5, "4", True):
            with self.subTest(rating=rating):
                with self.assertRaises(ValidationError):
                    self.service.add_review(auth_for(self.u), self.recipe.id, rating, "")
        self.assertFalse(Review.objects.exists())

    def test_rating_checked_before_credentials(self):
        with self.assertRaises(ValidationError):
            self.service.add_review(AuthInfo(self.u.id, "wrong"), self.recipe.id, 9, "")

    def test_missing_recipe(self):
        with self.assertRaises(NotFoundError):
            self.service.add_review(auth_for(self.u), 999, 3, "")

    def test_second_review_is_conflict(self):
        self.service.add_review(auth_for(self.u), self.recipe.id, 3, "")
        with self.assertRaises(ConflictError):
            self.service.add_review(auth_for(self.u), self.recipe.id, 4, "")
        self.assertEqual(Review.objects.count(), 1)

    def test_insert_race_reported_as_conflict(self):
        with patch.object(self.service.reviews, "has_reviewed", return_value=False), \
                patch.object(self.service.reviews, "create", side_effect=IntegrityError("duplicate")):
            with self.assertRaises(ConflictError):
                self.service.add_review(auth_for(self.u), self.recipe.id, 4, "")

    def test_bad_credentials(self):
        with self.assertRaises(AuthError):
            self.service.add_review(AuthInfo(self.u.id, "wrong"), self.recipe.id, 3, "")

    def test_only_author_edits_and_deletes(self):
        review_id = self.service.add_review(auth_for(self.u), self.recipe.id, 3, "")
        with self.assertRaises(AuthError):
            self.service.edit_review(auth_for(self.v), self.recipe.id, review_id, 1, "")
        with self.assertRaises(AuthError):
            self.service.delete_review(auth_for(self.v), self.recipe.id, review_id)
        self.assertTrue(Review.objects.filter(id=review_id).exists())

    def test_review_must_belong_to_recipe(self):
        other_recipe = make_recipe(name="Other")
        review_id = self.service.add_review(auth_for(self.u), self.recipe.id, 3, "")
        with self.assertRaises(NotFoundError):
            self.service.edit_review(auth_for(self.u), other_recipe.id, review_id, 4, "")
        with self.assertRaises(NotFoundError):
            self.service.delete_review(auth_for(self.u), self.recipe.id, 999)


class ReviewLikeTests(TestCase):

    def setUp(self):
        self.service = ReviewService()
        self.recipe = make_recipe(name="Risotto")
        self.writer = make_user(name="writer")
        self.fan = make_user(name="fan")
        self.other_fan = make_user(name="other_fan")
        self.review_id = self.service.add_review(auth_for(self.writer), self.recipe.id, 4, "")

    def test_like_twice_is_noop(self):
        self.assertEqual(self.service.like_review(auth_for(self.fan), self.review_id), 1)
        self.assertEqual(self.service.like_review(auth_for(self.fan), self.review_id), 1)
        self.assertEqual(self.service.like_review(auth_for(self.other_fan), self.review_id), 2)

    def test_like_count_is_read_fresh(self):
        ReviewLike.objects.create(review_id=self.review_id, user=self.other_fan)
        self.assertEqual(self.service.like_review(auth_for(self.fan), self.review_id), 2)

    def test_self_like_forbidden(self):
        with self.assertRaises(AuthError):
            self.service.like_review(auth_for(self.writer), self.review_id)

    def test_missing_review(self):
        with self.assertRaises(NotFoundError):
            self.service.like_review(auth_for(self.fan), 999)
        with self.assertRaises(NotFoundError):
            self.service.unlike_review(auth_for(self.fan), 999)

    def test_unlike(self):
        self.service.like_review(auth_for(self.fan), self.review_id)
        self.assertEqual(self.service.unlike_review(auth_for(self.fan), self.review_id), 0)
        self.assertEqual(self.service.unlike_review(auth_for(self.fan), self.review_id), 0)

    def test_unlike_keeps_other_likes(self):
        self.service.like_review(auth_for(self.other_fan), self.review_id)
        self.service.like_review(auth_for(self.fan), self.review_id)
        self.assertEqual(self.service.unlike_review(auth_for(self.fan), self.review_id), 1)
        self.assertEqual(self.service.unlike_review(auth_for(self.fan), self.review_id), 1)
        self.assertTrue(ReviewLike.objects.filter(review_id=self.review_id, user=self.other_fan).exists())

    def test_unlike_without_like_leaves_total(self):
        self.service.like_review(auth_for(self.other_fan), self.review_id)
        self.assertEqual(self.service.unlike_review(auth_for(self.fan), self.review_id), 1)

    def test_delete_review_removes_likes(self):
        self.service.like_review(auth_for(self.fan), self.review_id)
        self.service.delete_review(auth_for(self.writer), self.recipe.id, self.review_id)
        self.assertFalse(ReviewLike.objects.exists())


class ListByRecipeTests(TestCase):

    def setUp(self):
        self.service = ReviewService()
        self.recipe = make_recipe(name="Risotto")
        self.a = make_user(name="a")
        self.b = make_user(name="b")
        self.c = make_user(name="c")
        self.ra = self.service.add_review(auth_for(self.a), self.recipe.id, 5, "first")
        self.rb = self.service.add_review(auth_for(self.b), self.recipe.id, 3, "second")
        self.rc = self.service.add_review(auth_for(self.c), self.recipe.id, 1, "third")
        self.service.like_review(auth_for(self.b), self.ra)
        self.service.like_review(auth_for(self.c), self.ra)

    def test_sorted_by_likes(self):
        page = self.service.list_by_recipe(self.recipe.id, sort="likes_desc")
        self.assertEqual(page.items[0].id, self.ra)
        self.assertEqual(page.items[0].like_count, 2)
        self.assertEqual(page.items[0].liker_ids, [self.b.id, self.c.id])
        self.assertEqual(page.items[0].author_name, "a")
        self.assertEqual(page.total, 3)

    def test_default_sort_is_recently_modified(self):
        self.service.edit_review(auth_for(self.a), self.recipe.id, self.ra, 4, "edited")
        page = self.service.list_by_recipe(self.recipe.id)
        self.assertEqual(page.items[0].id, self.ra)

    def test_paging(self):
        page = self.service.list_by_recipe(self.recipe.id, page=2, size=2)
        self.assertEqual(len(page.items), 1)
        self.assertEqual(page.total, 3)

    def test_invalid_paging(self):
        with self.assertRaises(ValidationError):
            self.service.list_by_recipe(self.recipe.id, page=0)

    def test_missing_recipe_gives_empty_page(self):
        page = self.service.list_by_recipe(999)
        self.assertEqual(page.items, [])
        self.assertEqual(page.total, 0)

    def test_deleted_authors_hidden_but_counted_in_aggregate(self):
        AccountService().delete_account(auth_for(self.c), self.c.id)
        page = self.service.list_by_recipe(self.recipe.id, sort="likes_desc")
        self.assertEqual(page.total, 2)
        self.assertEqual(page.items[0].liker_ids, [self.b.id])
        self.recipe.refresh_from_db()
        self.assertEqual(self.recipe.review_count, 3)
