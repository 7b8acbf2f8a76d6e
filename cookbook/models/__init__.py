from .user import Gender, User
from .follow import Follow
from .recipe import Recipe
from .ingredient import Ingredient
from .review import Review
from .review_like import ReviewLike

__all__ = [
    "Gender",
    "User",
    "Follow",
    "Recipe",
    "Ingredient",
    "Review",
    "ReviewLike",
]
