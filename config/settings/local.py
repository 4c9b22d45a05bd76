from celery.schedules import crontab

from .base import *  # Import defaults from base.py

# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = env("SECRET_KEY", default="django-insecure-dev-key")

# SECURITY WARNING: don't run with debug turned on in production!
DEBUG = True

ALLOWED_HOSTS = ["*"]

# Database
# 'env.db()' automatically parses the 'DATABASE_URL' from docker-compose.yml
# e.g., postgres://postgres:postgres@db:5432/rewards_db
DATABASES = {
    "default": env.db(default="postgres://postgres:postgres@db:5432/rewards_db"),
}

# Redis Cache
CACHES = {
    "default": {
        "BACKEND": "django_redis.cache.RedisCache",
        "LOCATION": env("REDIS_URL", default="redis://redis:6379/0"),
        "OPTIONS": {
            "CLIENT_CLASS": "django_redis.client.DefaultClient",
        },
    }
}

# --- CELERY SETTINGS ---
CELERY_BROKER_URL = env("REDIS_URL", default="redis://redis:6379/0")
CELERY_RESULT_BACKEND = env("REDIS_URL", default="redis://redis:6379/0")

CELERY_BEAT_SCHEDULE = {
    "audit_points_totals_daily": {
        "task": "loyalty.tasks.audit_points_totals",
        # Run at 03:15 every night
        "schedule": crontab(minute=15, hour=3),
    },
}
