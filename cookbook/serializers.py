from rest_framework import serializers

from cookbook.durations import parse_duration_lenient, ZERO
from cookbook.exceptions import FormatError
from cookbook.models import Recipe, Review, User


class RecipeWriteSerializer(serializers.Serializer):
    """Validates recipe input before the recipe service writes anything."""
    name = serializers.CharField(max_length=255, allow_blank=False, trim_whitespace=True)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    category = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=255, default=None)
    cook_time = serializers.CharField(required=False, allow_blank=True, allow_null=True, default=None)
    prep_time = serializers.CharField(required=False, allow_blank=True, allow_null=True, default=None)
    date_published = serializers.DateTimeField(required=False, allow_null=True, default=None)

    calories = serializers.FloatField(required=False, allow_null=True, min_value=0, default=None)
    fat_content = serializers.FloatField(required=False, allow_null=True, min_value=0, default=None)
    saturated_fat_content = serializers.FloatField(required=False, allow_null=True, min_value=0, default=None)
    cholesterol_content = serializers.FloatField(required=False, allow_null=True, min_value=0, default=None)
    sodium_content = serializers.FloatField(required=False, allow_null=True, min_value=0, default=None)
    carbohydrate_content = serializers.FloatField(required=False, allow_null=True, min_value=0, default=None)
    fiber_content = serializers.FloatField(required=False, allow_null=True, min_value=0, default=None)
    sugar_content = serializers.FloatField(required=False, allow_null=True, min_value=0, default=None)
    protein_content = serializers.FloatField(required=False, allow_null=True, min_value=0, default=None)
    recipe_servings = serializers.IntegerField(required=False, allow_null=True, min_value=0, default=None)
    recipe_yield = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=255, default=None)

    ingredients = serializers.ListField(
        child=serializers.CharField(allow_blank=True, max_length=500, trim_whitespace=False),
        required=False,
        default=list,
    )

    def _duration(self, value):
        if value is None or not value.strip():
            return None
        try:
            parsed = parse_duration_lenient(value)
        except FormatError as error:
            raise serializers.ValidationError(error.message)
        if parsed < ZERO:
            raise serializers.ValidationError("Duration cannot be negative.")
        return parsed

    def validate_cook_time(self, value):
        """Parse cook time text into a timedelta (None when blank)."""
        return self._duration(value)

    def validate_prep_time(self, value):
        """Parse prep time text into a timedelta (None when blank)."""
        return self._duration(value)

    def validate_ingredients(self, value):
        """Drop blank lines and duplicates, keeping first-seen order."""
        return list(dict.fromkeys(part for part in value if part and part.strip()))


class RecipeSerializer(serializers.ModelSerializer):
    """Read representation of a recipe with author name and ordered ingredients."""
    author_id = serializers.IntegerField(read_only=True)
    author_name = serializers.CharField(read_only=True)
    ingredient_parts = serializers.ListField(child=serializers.CharField(), read_only=True)
    aggregated_rating = serializers.DecimalField(max_digits=3, decimal_places=2, read_only=True, coerce_to_string=False)

    class Meta:
        model = Recipe
        fields = [
            "id",
            "name",
            "author_id",
            "author_name",
            "cook_time",
            "prep_time",
            "total_time",
            "date_published",
            "description",
            "category",
            "ingredient_parts",
            "aggregated_rating",
            "review_count",
            "calories",
            "fat_content",
            "saturated_fat_content",
            "cholesterol_content",
            "sodium_content",
            "carbohydrate_content",
            "fiber_content",
            "sugar_content",
            "protein_content",
            "recipe_servings",
            "recipe_yield",
        ]
        read_only_fields = ["id", "total_time", "review_count"]


class ReviewSerializer(serializers.ModelSerializer):
    """Review with its like total and the ids of the users who liked it."""
    recipe_id = serializers.IntegerField(read_only=True)
    author_id = serializers.IntegerField(read_only=True)
    author_name = serializers.CharField(read_only=True)
    like_count = serializers.IntegerField(read_only=True)
    liker_ids = serializers.ListField(child=serializers.IntegerField(), read_only=True)

    class Meta:
        model = Review
        fields = [
            "id",
            "recipe_id",
            "author_id",
            "author_name",
            "rating",
            "text",
            "date_submitted",
            "date_modified",
            "like_count",
            "liker_ids",
        ]
        read_only_fields = ["id", "date_submitted", "date_modified"]


class UserSerializer(serializers.ModelSerializer):
    """Public user record; the credential is never serialized."""
    follower_ids = serializers.ListField(child=serializers.IntegerField(), read_only=True)
    following_ids = serializers.ListField(child=serializers.IntegerField(), read_only=True)

    class Meta:
        model = User
        fields = [
            "id",
            "name",
            "gender",
            "age",
            "is_deleted",
            "follower_count",
            "following_count",
            "follower_ids",
            "following_ids",
        ]
        read_only_fields = ["id", "follower_count", "following_count"]
