"""
URL configuration for the cookbook_site project.

Only the read-only JSON API is routed; all mutations go through the
services in `cookbook.services`.
"""
from django.urls import path

from cookbook.views.api_views import (
    RecipeDetailApi,
    RecipeReviewsApi,
    RecipeSearchApi,
    StatsApi,
    UserDetailApi,
)

urlpatterns = [
    path('api/recipes/', RecipeSearchApi.as_view(), name='recipe_search_api'),
    path('api/recipes/<int:pk>/', RecipeDetailApi.as_view(), name='recipe_detail_api'),
    path('api/recipes/<int:pk>/reviews/', RecipeReviewsApi.as_view(), name='recipe_reviews_api'),
    path('api/users/<int:pk>/', UserDetailApi.as_view(), name='user_detail_api'),
    path('api/stats/', StatsApi.as_view(), name='stats_api'),
]
