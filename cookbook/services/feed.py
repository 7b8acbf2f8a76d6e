"""Following feed: recent recipes from the users an actor follows."""

from django.conf import settings

from cookbook.authentication import resolve_actor
from cookbook.pagination import clamp_paging, paginate
from cookbook.repos.follow_repo import FollowRepo
from cookbook.repos.recipe_repo import RecipeQuery, RecipeSort

DEFAULT_MAX_PAGE_SIZE = 200


class FeedService:
    """Encapsulate the following feed."""

    def __init__(self, *, follows=None) -> None:
        self.follows = follows or FollowRepo()

    def max_page_size(self) -> int:
        return getattr(settings, "COOKBOOK_FEED_MAX_PAGE_SIZE", DEFAULT_MAX_PAGE_SIZE)

    def following_feed(self, auth, page=1, size=10, category=None):
        """
        Newest recipes by followed, still active authors.

        Paging is clamped rather than rejected: page below 1 becomes 1 and
        size is pulled into 1..max page size.
        """
        actor = resolve_actor(auth)
        page, size = clamp_paging(page, size, max_size=self.max_page_size())
        query = (
            RecipeQuery(RecipeSort.DATE_DESC)
            .authored_by(self.follows.following_ids(actor.id))
            .category(category)
        )
        return paginate(query.queryset(), page, size, total=query.count())
