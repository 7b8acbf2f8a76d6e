"""
Django settings for the cookbook_site project.

Values that differ between deployments are read from the environment:

    DJANGO_SECRET_KEY, DJANGO_DEBUG, DJANGO_ALLOWED_HOSTS
    COOKBOOK_DB_ENGINE (sqlite | postgresql), COOKBOOK_DB_NAME,
    COOKBOOK_DB_USER, COOKBOOK_DB_PASSWORD, COOKBOOK_DB_HOST, COOKBOOK_DB_PORT
    COOKBOOK_LOG_LEVEL
"""

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent


def _env_truthy(name, default="0"):
    return os.environ.get(name, default).strip().lower() in {"1", "true", "yes", "on"}


SECRET_KEY = os.environ.get("DJANGO_SECRET_KEY", "django-insecure-cookbook-dev-key")

DEBUG = _env_truthy("DJANGO_DEBUG")

ALLOWED_HOSTS = [
    host.strip()
    for host in os.environ.get("DJANGO_ALLOWED_HOSTS", "localhost,127.0.0.1").split(",")
    if host.strip()
]

INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "django.contrib.auth",
    "rest_framework",
    "cookbook",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
]

ROOT_URLCONF = "cookbook_site.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {"context_processors": []},
    },
]

WSGI_APPLICATION = "cookbook_site.wsgi.application"


def _database_config():
    engine = os.environ.get("COOKBOOK_DB_ENGINE", "sqlite").strip().lower()
    if engine in {"postgres", "postgresql"}:
        return {
            "ENGINE": "django.db.backends.postgresql",
            "NAME": os.environ.get("COOKBOOK_DB_NAME", "cookbook"),
            "USER": os.environ.get("COOKBOOK_DB_USER", "cookbook"),
            "PASSWORD": os.environ.get("COOKBOOK_DB_PASSWORD", ""),
            "HOST": os.environ.get("COOKBOOK_DB_HOST", "localhost"),
            "PORT": os.environ.get("COOKBOOK_DB_PORT", "5432"),
            "ATOMIC_REQUESTS": False,
        }
    return {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": os.environ.get("COOKBOOK_DB_NAME", str(BASE_DIR / "db.sqlite3")),
    }


DATABASES = {"default": _database_config()}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

AUTH_USER_MODEL = "cookbook.User"

AUTH_PASSWORD_VALIDATORS = []

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PERMISSION_CLASSES": ["rest_framework.permissions.AllowAny"],
    "DEFAULT_RENDERER_CLASSES": ["rest_framework.renderers.JSONRenderer"],
    "EXCEPTION_HANDLER": "cookbook.views.api_views.core_exception_handler",
    "UNAUTHENTICATED_USER": None,
}

# Core tunables
COOKBOOK_ID_ALLOCATION_ATTEMPTS = int(os.environ.get("COOKBOOK_ID_ALLOCATION_ATTEMPTS", "5"))
COOKBOOK_FEED_MAX_PAGE_SIZE = int(os.environ.get("COOKBOOK_FEED_MAX_PAGE_SIZE", "200"))

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {
            "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "simple",
        },
    },
    "loggers": {
        "cookbook": {
            "handlers": ["console"],
            "level": os.environ.get("COOKBOOK_LOG_LEVEL", "INFO").upper(),
            "propagate": False,
        },
    },
}
