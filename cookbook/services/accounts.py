"""Account lifecycle: registration, credential checks, profile updates and soft deletion."""

import logging
from datetime import date, datetime

from django.contrib.auth.hashers import make_password
from django.db import transaction
from django.utils import timezone
from django.utils.dateparse import parse_date

from cookbook.authentication import AuthInfo, resolve_actor
from cookbook.exceptions import AuthError, ConflictError, NotFoundError, ValidationError
from cookbook.models import Gender
from cookbook.repos.follow_repo import FollowRepo
from cookbook.repos.review_repo import ReviewLikeRepo
from cookbook.repos.user_repo import UserRepo

logger = logging.getLogger(__name__)


def age_from_birth_date(birth_date, today=None):
    """Full years between `birth_date` (``YYYY-MM-DD`` or a date) and today."""
    if isinstance(birth_date, datetime):
        born = birth_date.date()
    elif isinstance(birth_date, date):
        born = birth_date
    else:
        text = (birth_date or "").strip() if isinstance(birth_date, str) else ""
        if not text:
            raise ValidationError("Birth date is required", code="birth_date")
        try:
            born = parse_date(text)
        except ValueError:
            born = None
        if born is None:
            raise ValidationError("Invalid birth date format, expected YYYY-MM-DD", code="birth_date")

    today = today or timezone.localdate()
    return today.year - born.year - ((today.month, today.day) < (born.month, born.day))


def clean_gender(gender):
    """Return the stored gender value or raise ValidationError."""
    if gender not in Gender.values:
        raise ValidationError("Gender must be 'Male' or 'Female'", code="gender")
    return Gender(gender).value


class AccountService:
    """Encapsulate the user account lifecycle."""

    def __init__(self, *, users=None, follows=None, likes=None):
        self.users = users or UserRepo()
        self.follows = follows or FollowRepo()
        self.likes = likes or ReviewLikeRepo()

    def register(self, name, gender, birth_date, password):
        """Create an account and return its id; counters start at zero."""
        if not name or not str(name).strip():
            raise ValidationError("Name must not be blank", code="name")
        gender = clean_gender(gender)
        age = age_from_birth_date(birth_date)
        if age <= 0:
            raise ValidationError("Age derived from birth date must be positive", code="birth_date")
        if not password or not str(password).strip():
            raise ValidationError("Password must not be blank", code="password")
        if self.users.name_taken(name):
            raise ConflictError(f"Name {name!r} is already taken", code="name")

        def _name_race():
            if self.users.name_taken(name):
                raise ConflictError(f"Name {name!r} is already taken", code="name")

        user = self.users.create_with_next_id(
            on_conflict=_name_race,
            name=name,
            gender=gender,
            age=age,
            password=make_password(password),
        )
        logger.info("User registered: %s (id %s)", name, user.id)
        return user.id

    def authenticate(self, auth, password=None):
        """Check credentials and return the user id; accepts AuthInfo or (user_id, password)."""
        if not isinstance(auth, AuthInfo):
            auth = AuthInfo(user_id=auth, password=password)
        return resolve_actor(auth).id

    @transaction.atomic
    def delete_account(self, auth, user_id):
        """
        Soft-delete the actor's own account.

        Every follow edge touching the account and every like it gave are
        removed, the counters of each connected user are recomputed from the
        remaining edges, and the account's own counters are zeroed.
        """
        actor = resolve_actor(auth)
        if actor.id != user_id:
            raise AuthError("Users can only delete their own account")

        affected = self.follows.neighbours(actor.id)
        locked = {user.id: user for user in self.users.lock_many({actor.id} | affected)}
        target = locked.get(actor.id)
        if target is None or target.is_deleted:
            raise NotFoundError("Target user does not exist or is already inactive")
        # edges created before the actor row was locked
        late = self.follows.neighbours(actor.id) - locked.keys()
        if late:
            self.users.lock_many(late)
            affected |= late
        removed_edges = self.follows.purge(actor.id)
        self.likes.delete(user_id=actor.id)
        self.users.update({"id": actor.id}, is_deleted=True, follower_count=0, following_count=0)
        self.users.recount(affected)

        logger.info(
            "User %s soft-deleted; %s follow edges removed, %s users recounted",
            actor.id, removed_edges, len(affected),
        )
        return True

    @transaction.atomic
    def update_profile(self, auth, gender=None, age=None):
        """Update only the supplied profile fields; blank gender or None leaves a field unchanged."""
        actor = resolve_actor(auth, lock=True)
        changes = {}
        if gender is not None and str(gender).strip():
            changes["gender"] = clean_gender(gender)
        if age is not None:
            if isinstance(age, bool) or not isinstance(age, int) or age <= 0:
                raise ValidationError("Age must be a positive integer", code="age")
            changes["age"] = age

        if not changes:
            return actor
        self.users.update({"id": actor.id}, **changes)
        logger.info("Profile updated for user %s: %s", actor.id, ", ".join(sorted(changes)))
        actor.refresh_from_db()
        return actor

    def get_by_id(self, user_id):
        """Return the user with `follower_ids` / `following_ids` attached, or None."""
        user = self.users.get_by_id(user_id)
        if user is None:
            return None
        user.follower_ids = self.follows.follower_ids(user.id)
        user.following_ids = self.follows.following_ids(user.id)
        return user
