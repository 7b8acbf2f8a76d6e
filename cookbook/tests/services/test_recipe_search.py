from datetime import timedelta
from decimal import Decimal

from django.test import TestCase
from django.utils import timezone

from cookbook.exceptions import ValidationError
from cookbook.services import RecipeService
from cookbook.tests.helpers import make_recipe, make_user


class RecipeSearchTests(TestCase):

    def setUp(self):
        self.service = RecipeService()
        self.author = make_user(name="chef")
        now = timezone.now()
        self.r5 = make_recipe(author=self.author, name="Five", aggregated_rating=Decimal("5.00"),
                              date_published=now - timedelta(days=3), ingredients=["a", "b", "c"])
        self.r48a = make_recipe(author=self.author, name="FourEightA", aggregated_rating=Decimal("4.80"),
                                date_published=now - timedelta(days=2), ingredients=["a", "b"])
        self.r48b = make_recipe(author=self.author, name="FourEightB", aggregated_rating=Decimal("4.80"),
                                date_published=now - timedelta(days=1), ingredients=["a"])
        self.r40 = make_recipe(author=self.author, name="Four", aggregated_rating=Decimal("4.00"),
                               date_published=now)

    def test_min_rating_sorted_and_counted(self):
        page = self.service.search(min_rating=4.5, sort="rating_desc", page=1, size=2)
        self.assertEqual(page.total, 3)
        self.assertEqual([r.aggregated_rating for r in page.items], [Decimal("5.00"), Decimal("4.80")])
        self.assertEqual(page.items[0], self.r5)
        self.assertTrue(page.has_next)

    def test_equal_keys_do_not_repeat_across_pages(self):
        first = self.service.search(min_rating="4.5", sort="rating_desc", page=1, size=2)
        second = self.service.search(min_rating="4.5", sort="rating_desc", page=2, size=2)
        ids = [r.id for r in first.items] + [r.id for r in second.items]
        self.assertCountEqual(ids, [self.r5.id, self.r48a.id, self.r48b.id])
        self.assertEqual([r.id for r in second.items], [self.r48a.id])

    def test_default_sort_is_newest_first(self):
        page = self.service.search(size=10)
        self.assertEqual(page.items, [self.r40, self.r48b, self.r48a, self.r5])

    def test_unknown_sort_falls_back_to_date(self):
        page = self.service.search(sort="random")
        self.assertEqual(page.items[0], self.r40)

    def test_keyword_is_case_insensitive(self):
        page = self.service.search(keyword="foureight")
        self.assertEqual(page.total, 2)

    def test_total_not_inflated_by_ingredients(self):
        page = self.service.search(keyword="f", size=1)
        self.assertEqual(page.total, 4)
        self.assertEqual(len(page.items), 1)

    def test_items_carry_ingredients(self):
        page = self.service.search(keyword="Five")
        self.assertEqual(page.items[0].ingredient_parts, ["a", "b", "c"])

    def test_category_filter(self):
        make_recipe(author=self.author, name="Soup", category="Soup")
        self.assertEqual(self.service.search(category="Soup").total, 1)

    def test_empty_result(self):
        page = self.service.search(keyword="nothing matches")
        self.assertEqual(page.items, [])
        self.assertEqual(page.total, 0)

    def test_invalid_paging_rejected(self):
        for page, size in ((0, 10), (1, 0), (-2, 5), (1, -1)):
            with self.subTest(page=page, size=size):
                with self.assertRaises(ValidationError):
                    self.service.search(page=page, size=size)

    def test_non_numeric_min_rating_rejected(self):
        with self.assertRaises(ValidationError):
            self.service.search(min_rating="high")
