"""Account model: display name, profile fields, soft-delete flag and cached follow counters."""

from django.contrib.auth.base_user import AbstractBaseUser, BaseUserManager
from django.core.validators import MinValueValidator
from django.db import models


class Gender(models.TextChoices):
    MALE = "Male", "Male"
    FEMALE = "Female", "Female"


class UserManager(BaseUserManager):
    """Manager creating users with explicit ids and hashed credentials."""

    use_in_migrations = True

    def create_user(self, name, password=None, **extra_fields):
        """Create and save a user; counters start at zero."""
        if not name:
            raise ValueError("Users must have a name")
        user = self.model(name=name, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def active(self):
        """Users that have not been soft-deleted."""
        return self.filter(is_deleted=False)


class User(AbstractBaseUser):
    """Model for accounts; never hard-deleted, `is_deleted` marks closed accounts."""

    id = models.BigIntegerField(primary_key=True)
    name = models.CharField(max_length=255, unique=True)
    gender = models.CharField(max_length=6, choices=Gender.choices)
    age = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    is_deleted = models.BooleanField(default=False)

    # cached counters, kept in step with user_follows by the follow/account services
    follower_count = models.PositiveIntegerField(default=0)
    following_count = models.PositiveIntegerField(default=0)

    objects = UserManager()

    USERNAME_FIELD = "name"
    REQUIRED_FIELDS = ["gender", "age"]

    class Meta:
        """Table name and default ordering for users."""
        db_table = "users"
        ordering = ["id"]

    def __str__(self):
        """Readable representation for admin/debugging."""
        return f"{self.name} ({self.id})"

    @property
    def is_active(self):
        return not self.is_deleted
