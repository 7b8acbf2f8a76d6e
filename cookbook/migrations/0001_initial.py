import cookbook.models.user
import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="User",
            fields=[
                ("password", models.CharField(max_length=128, verbose_name="password")),
                ("last_login", models.DateTimeField(blank=True, null=True, verbose_name="last login")),
                ("id", models.BigIntegerField(primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=255, unique=True)),
                ("gender", models.CharField(choices=[("Male", "Male"), ("Female", "Female")], max_length=6)),
                ("age", models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)])),
                ("is_deleted", models.BooleanField(default=False)),
                ("follower_count", models.PositiveIntegerField(default=0)),
                ("following_count", models.PositiveIntegerField(default=0)),
            ],
            options={
                "db_table": "users",
                "ordering": ["id"],
            },
            managers=[
                ("objects", cookbook.models.user.UserManager()),
            ],
        ),
        migrations.CreateModel(
            name="Recipe",
            fields=[
                ("id", models.BigIntegerField(primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True, default="")),
                ("category", models.CharField(blank=True, max_length=255, null=True)),
                ("cook_time", models.CharField(blank=True, max_length=64, null=True)),
                ("prep_time", models.CharField(blank=True, max_length=64, null=True)),
                ("total_time", models.CharField(blank=True, max_length=64, null=True)),
                ("date_published", models.DateTimeField(default=django.utils.timezone.now)),
                ("aggregated_rating", models.DecimalField(blank=True, decimal_places=2, max_digits=3, null=True)),
                ("review_count", models.PositiveIntegerField(default=0)),
                ("calories", models.FloatField(blank=True, null=True)),
                ("fat_content", models.FloatField(blank=True, null=True)),
                ("saturated_fat_content", models.FloatField(blank=True, null=True)),
                ("cholesterol_content", models.FloatField(blank=True, null=True)),
                ("sodium_content", models.FloatField(blank=True, null=True)),
                ("carbohydrate_content", models.FloatField(blank=True, null=True)),
                ("fiber_content", models.FloatField(blank=True, null=True)),
                ("sugar_content", models.FloatField(blank=True, null=True)),
                ("protein_content", models.FloatField(blank=True, null=True)),
                ("recipe_servings", models.PositiveIntegerField(blank=True, null=True)),
                ("recipe_yield", models.CharField(blank=True, max_length=255, null=True)),
                ("author", models.ForeignKey(db_column="author_id", on_delete=django.db.models.deletion.PROTECT, related_name="recipes", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "db_table": "recipes",
                "indexes": [
                    models.Index(fields=["author"], name="recipes_author_idx"),
                    models.Index(fields=["category"], name="recipes_category_idx"),
                    models.Index(fields=["-date_published"], name="recipes_published_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Follow",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("follower", models.ForeignKey(db_column="follower_id", on_delete=django.db.models.deletion.CASCADE, related_name="following_edges", to=settings.AUTH_USER_MODEL)),
                ("followee", models.ForeignKey(db_column="followee_id", on_delete=django.db.models.deletion.CASCADE, related_name="follower_edges", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "db_table": "user_follows",
                "indexes": [
                    models.Index(fields=["follower"], name="user_follows_follower_idx"),
                    models.Index(fields=["followee"], name="user_follows_followee_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(fields=("follower", "followee"), name="uniq_user_follows_pair"),
                    models.CheckConstraint(condition=models.Q(("follower", models.F("followee")), _negated=True), name="chk_user_follows_not_self"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Ingredient",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("part", models.CharField(max_length=500)),
                ("recipe", models.ForeignKey(db_column="recipe_id", on_delete=django.db.models.deletion.CASCADE, related_name="ingredients", to="cookbook.recipe")),
            ],
            options={
                "db_table": "recipe_ingredients",
                "constraints": [
                    models.UniqueConstraint(fields=("recipe", "part"), name="uniq_recipe_ingredient_part"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Review",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("rating", models.PositiveSmallIntegerField()),
                ("text", models.TextField(blank=True, default="")),
                ("date_submitted", models.DateTimeField(default=django.utils.timezone.now)),
                ("date_modified", models.DateTimeField(default=django.utils.timezone.now)),
                ("author", models.ForeignKey(db_column="author_id", on_delete=django.db.models.deletion.CASCADE, related_name="reviews", to=settings.AUTH_USER_MODEL)),
                ("recipe", models.ForeignKey(db_column="recipe_id", on_delete=django.db.models.deletion.CASCADE, related_name="reviews", to="cookbook.recipe")),
            ],
            options={
                "db_table": "reviews",
                "constraints": [
                    models.UniqueConstraint(fields=("recipe", "author"), name="uniq_review_recipe_author"),
                    models.CheckConstraint(condition=models.Q(("rating__gte", 1), ("rating__lte", 5)), name="chk_review_rating_range"),
                ],
            },
        ),
        migrations.CreateModel(
            name="ReviewLike",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("review", models.ForeignKey(db_column="review_id", on_delete=django.db.models.deletion.CASCADE, related_name="likes", to="cookbook.review")),
                ("user", models.ForeignKey(db_column="user_id", on_delete=django.db.models.deletion.CASCADE, related_name="review_likes", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "db_table": "review_likes",
                "constraints": [
                    models.UniqueConstraint(fields=("review", "user"), name="uniq_review_like_pair"),
                ],
            },
        ),
    ]
