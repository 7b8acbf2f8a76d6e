"""Session credentials passed explicitly to every operation that needs an actor."""

from dataclasses import dataclass

from django.contrib.auth import get_user_model

from cookbook.exceptions import AuthError


@dataclass(frozen=True)
class AuthInfo:
    """Caller identity: the user id plus the credential to check against it."""
    user_id: int
    password: str


def resolve_actor(auth, *, lock=False):
    """
    Authenticate `auth` and return the active user it names.

    Raises AuthError when credentials are missing, the user does not exist or is
    soft-deleted, or the password does not match. With ``lock=True`` the user
    row is selected for update, so this must run inside ``transaction.atomic``.
    """
    if auth is None:
        raise AuthError("Authentication info is required")
    if not auth.password or not str(auth.password).strip():
        raise AuthError("Password is required")

    User = get_user_model()
    qs = User.objects.filter(pk=auth.user_id)
    if lock:
        qs = qs.select_for_update()
    user = qs.first()

    if user is None or user.is_deleted:
        raise AuthError("User is invalid or inactive")
    if not user.check_password(auth.password):
        raise AuthError("Credentials do not match")
    return user
