from django.db import IntegrityError
from django.test import TestCase

from cookbook.models import User
from cookbook.tests.helpers import make_user


class UserModelTestCase(TestCase):

    def setUp(self):
        self.user = make_user(name="alice")

    def test_password_is_hashed(self):
        self.assertNotEqual(self.user.password, "Password123")
        self.assertTrue(self.user.check_password("Password123"))

    def test_counters_start_at_zero(self):
        self.assertEqual(self.user.follower_count, 0)
        self.assertEqual(self.user.following_count, 0)
        self.assertFalse(self.user.is_deleted)

    def test_name_is_unique(self):
        with self.assertRaises(IntegrityError):
            User.objects.create(id=99, name="alice", gender="Female", age=20)

    def test_active_manager_excludes_soft_deleted(self):
        bob = make_user(name="bob")
        bob.is_deleted = True
        bob.save()
        self.assertEqual(list(User.objects.active()), [self.user])
        self.assertFalse(bob.is_active)

    def test_str_contains_name_and_id(self):
        self.assertEqual(str(self.user), f"alice ({self.user.id})")
