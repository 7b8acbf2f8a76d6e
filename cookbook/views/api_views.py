from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView, exception_handler

from cookbook.exceptions import AuthError, ConflictError, NotFoundError, ValidationError
from cookbook.serializers import RecipeSerializer, ReviewSerializer, UserSerializer
from cookbook.services import AccountService, AnalyticsService, RecipeService, ReviewService

__all__ = [
    "core_exception_handler",
    "RecipeSearchApi",
    "RecipeDetailApi",
    "RecipeReviewsApi",
    "UserDetailApi",
    "StatsApi",
]


def _error_body(exc):
    if hasattr(exc, "error_dict"):
        return {"detail": exc.message_dict}
    return {"detail": exc.messages[0] if len(exc.messages) == 1 else exc.messages}


def core_exception_handler(exc, context):
    """Map cookbook errors to HTTP statuses, deferring everything else to DRF."""
    if isinstance(exc, ConflictError):
        return Response(_error_body(exc), status=status.HTTP_409_CONFLICT)
    if isinstance(exc, ValidationError):
        return Response(_error_body(exc), status=status.HTTP_400_BAD_REQUEST)
    if isinstance(exc, AuthError):
        return Response({"detail": str(exc)}, status=status.HTTP_403_FORBIDDEN)
    if isinstance(exc, NotFoundError):
        return Response({"detail": str(exc) or "Not found."}, status=status.HTTP_404_NOT_FOUND)
    return exception_handler(exc, context)


def _int_param(request, name, default):
    raw = request.query_params.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"{name} must be an integer", code=name)


def _page_body(page, serializer_class):
    return {
        "items": serializer_class(page.items, many=True).data,
        "page": page.page,
        "size": page.size,
        "total": page.total,
    }


class RecipeSearchApi(APIView):
    """Search recipes by keyword, category and minimum rating."""

    def get(self, request):
        params = request.query_params
        page = RecipeService().search(
            keyword=params.get("keyword"),
            category=params.get("category"),
            min_rating=params.get("min_rating"),
            page=_int_param(request, "page", 1),
            size=_int_param(request, "size", 10),
            sort=params.get("sort"),
        )
        return Response(_page_body(page, RecipeSerializer))


class RecipeDetailApi(APIView):
    def get(self, request, pk):
        recipe = RecipeService().get_by_id(pk)
        if recipe is None:
            raise NotFoundError(f"Recipe {pk} does not exist")
        return Response(RecipeSerializer(recipe).data)


class RecipeReviewsApi(APIView):
    """Paginated reviews of one recipe."""

    def get(self, request, pk):
        page = ReviewService().list_by_recipe(
            pk,
            page=_int_param(request, "page", 1),
            size=_int_param(request, "size", 10),
            sort=request.query_params.get("sort"),
        )
        return Response(_page_body(page, ReviewSerializer))


class UserDetailApi(APIView):
    def get(self, request, pk):
        user = AccountService().get_by_id(pk)
        if user is None:
            raise NotFoundError(f"User {pk} does not exist")
        return Response(UserSerializer(user).data)


class StatsApi(APIView):
    """The three read-only analytics results in one response."""

    def get(self, request):
        analytics = AnalyticsService()
        return Response({
            "closest_calorie_pair": analytics.closest_calorie_pair(),
            "top_complex_recipes": analytics.top_complex_recipes(),
            "highest_follow_ratio": analytics.highest_follow_ratio(),
        })
