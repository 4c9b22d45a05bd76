"""
Settings used by pytest-django.
SQLite + local memory cache, Celery tasks run inline.
"""

from .base import *

SECRET_KEY = "test-secret-key"

DEBUG = False

ALLOWED_HOSTS = ["*"]

DATABASES = {
    "default": env.db("DATABASE_URL", default=f"sqlite:///{BASE_DIR / 'test_db.sqlite3'}"),
}

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
    }
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

EMAIL_BACKEND = "django.core.mail.backends.locmem.EmailBackend"

CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True
CELERY_BROKER_URL = "memory://"
CELERY_RESULT_BACKEND = "cache+memory://"

# Set when DATABASE_URL points at Postgres: the row-lock concurrency tests
# then fail the run instead of being skipped on a database without them.
TEST_REQUIRE_ROW_LOCKS = env.bool("TEST_REQUIRE_ROW_LOCKS", default=False)
