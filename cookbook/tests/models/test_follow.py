from django.db import IntegrityError, transaction
from django.test import TestCase

from cookbook.models import Follow
from cookbook.tests.helpers import make_user


class FollowModelTestCase(TestCase):

    def setUp(self):
        self.alice = make_user(name="alice")
        self.bob = make_user(name="bob")

    def test_edge_is_unique_per_pair(self):
        Follow.objects.create(follower=self.alice, followee=self.bob)
        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                Follow.objects.create(follower=self.alice, followee=self.bob)

    def test_reverse_edge_is_allowed(self):
        Follow.objects.create(follower=self.alice, followee=self.bob)
        Follow.objects.create(follower=self.bob, followee=self.alice)
        self.assertEqual(Follow.objects.count(), 2)

    def test_self_edge_is_rejected(self):
        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                Follow.objects.create(follower=self.alice, followee=self.alice)
