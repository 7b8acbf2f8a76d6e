from .accounts import AccountService
from .analytics import AnalyticsService
from .feed import FeedService
from .follow import FollowService
from .recipes import RecipeService
from .reviews import ReviewService

__all__ = [
    "AccountService",
    "AnalyticsService",
    "FeedService",
    "FollowService",
    "RecipeService",
    "ReviewService",
]
