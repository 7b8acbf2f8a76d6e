from django.db.models import Max
from django.utils import timezone

from cookbook.authentication import AuthInfo
from cookbook.models import Ingredient, Recipe, User

DEFAULT_PASSWORD = "Password123"


def _next_id(model):
    highest = model.objects.aggregate(highest=Max("pk"))["highest"]
    return (highest or 0) + 1


def make_user(name="johndoe", *, password=DEFAULT_PASSWORD, **kwargs):
    return User.objects.create_user(
        name=name,
        password=password,
        id=kwargs.pop("id", _next_id(User)),
        gender=kwargs.pop("gender", "Male"),
        age=kwargs.pop("age", 30),
        **kwargs,
    )


def auth_for(user, password=DEFAULT_PASSWORD):
    """Session credentials for `user`."""
    return AuthInfo(user_id=user.id, password=password)


def make_recipe(*, author=None, name="test recipe", ingredients=(), **extra):
    """
    creates and returns a recipe. `ingredients` are stored as ingredient rows.
    """
    if author is None:
        author = make_user(name=f"author{_next_id(User)}")

    recipe = Recipe.objects.create(
        id=extra.pop("id", _next_id(Recipe)),
        author=author,
        name=name,
        description=extra.pop("description", "desc"),
        date_published=extra.pop("date_published", timezone.now()),
        **extra,
    )
    for part in ingredients:
        Ingredient.objects.create(recipe=recipe, part=part)
    return recipe
