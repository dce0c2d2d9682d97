"""
Django settings for the feed translator project.

Every value can be overridden through an environment variable of the same
name. Defaults target local development: SQLite in DATA_FOLDER and an
in-memory cache when REDIS_URL is unset.
"""
import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent
DATA_FOLDER = Path(os.getenv("DATA_FOLDER", BASE_DIR / "data"))
os.makedirs(DATA_FOLDER, exist_ok=True)

SECRET_KEY = os.getenv("SECRET_KEY", "django-insecure-change-me-in-production")
DEBUG = os.getenv("DEBUG", "0") == "1"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

ALLOWED_HOSTS = os.getenv("ALLOWED_HOSTS", "*").split(",")
CSRF_TRUSTED_ORIGINS = [
    origin for origin in os.getenv("CSRF_TRUSTED_ORIGINS", "").split(",") if origin
]

INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "core.apps.CoreConfig",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "config.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

WSGI_APPLICATION = "config.wsgi.application"

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": DATA_FOLDER / "db.sqlite3",
    }
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

STATIC_URL = "static/"
STATIC_ROOT = DATA_FOLDER / "static"

# Redis backs both the translation cache and the Celery broker.
REDIS_URL = os.getenv("REDIS_URL", "")

if REDIS_URL:
    CACHES = {
        "default": {
            "BACKEND": "django.core.cache.backends.redis.RedisCache",
            "LOCATION": REDIS_URL,
        },
        "translations": {
            "BACKEND": "django.core.cache.backends.redis.RedisCache",
            "LOCATION": REDIS_URL,
            "KEY_PREFIX": "ft",
        },
    }
else:
    CACHES = {
        "default": {
            "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        },
        "translations": {
            "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
            "LOCATION": "translations",
        },
    }

# Translation
TRANSLATION_PROVIDER = os.getenv("TRANSLATION_PROVIDER", "dummy")
GOOGLE_TRANSLATE_API_KEY = os.getenv("GOOGLE_TRANSLATE_API_KEY", "")
GOOGLE_TRANSLATE_ENDPOINT = os.getenv(
    "GOOGLE_TRANSLATE_ENDPOINT",
    "https://translation.googleapis.com/language/translate/v2",
)
TRANSLATION_CACHE_ALIAS = "translations"
TRANSLATION_CACHE_TIMEOUT = int(os.getenv("TRANSLATION_CACHE_TIMEOUT", 60 * 60 * 24 * 180))
DEFAULT_SOURCE_LANGUAGE = os.getenv("DEFAULT_SOURCE_LANGUAGE", "he")
TARGET_LANGUAGE = os.getenv("TARGET_LANGUAGE", "en")

# Feed fetching
FEED_USER_AGENT = os.getenv(
    "FEED_USER_AGENT",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:141.0) Gecko/20100101 Firefox/141.0",
)
FEED_ACCEPT_LANGUAGE = os.getenv(
    "FEED_ACCEPT_LANGUAGE", "he-IL,he;q=0.9,en-US;q=0.8,en;q=0.7"
)
FEED_REQUEST_TIMEOUT = float(os.getenv("FEED_REQUEST_TIMEOUT", 15))
FEED_MAX_RETRIES = int(os.getenv("FEED_MAX_RETRIES", 2))
FEED_RETRY_DELAY = float(os.getenv("FEED_RETRY_DELAY", 1))
FEED_HTTP2 = os.getenv("FEED_HTTP2", "1") == "1"
FEED_POLITE_DELAY = float(os.getenv("FEED_POLITE_DELAY", 0.5))

# Jobs
INGEST_INTERVAL = int(os.getenv("INGEST_INTERVAL", 5 * 60))
TRANSLATION_CONCURRENCY = int(os.getenv("TRANSLATION_CONCURRENCY", 3))
FAILED_JOB_RETENTION_DAYS = int(os.getenv("FAILED_JOB_RETENTION_DAYS", 7))

CELERY_BROKER_URL = os.getenv("CELERY_BROKER_URL", REDIS_URL or "redis://localhost:6379/0")
CELERY_RESULT_BACKEND = os.getenv("CELERY_RESULT_BACKEND", CELERY_BROKER_URL)
CELERY_RESULT_EXPIRES = 60 * 60 * 24
CELERY_TASK_SERIALIZER = "json"
CELERY_RESULT_SERIALIZER = "json"
CELERY_ACCEPT_CONTENT = ["json"]
CELERY_TIMEZONE = TIME_ZONE
CELERY_TASK_ACKS_LATE = True
CELERY_TASK_REJECT_ON_WORKER_LOST = True
CELERY_WORKER_PREFETCH_MULTIPLIER = 1
CELERY_TASK_TIME_LIMIT = 30 * 60
# A job held longer than this without an ack is handed to another worker.
CELERY_BROKER_TRANSPORT_OPTIONS = {"visibility_timeout": 60 * 60}
CELERY_TASK_ROUTES = {
    "core.ingest_all_sources": {"queue": "ingest"},
    "core.ingest_source": {"queue": "ingest"},
    "core.prune_failed_jobs": {"queue": "ingest"},
    "core.translate_content_item": {"queue": "translation"},
}
CELERY_BEAT_SCHEDULE = {
    "ingest-all": {
        "task": "core.ingest_all_sources",
        "schedule": INGEST_INTERVAL,
    },
    "prune-failed-jobs": {
        "task": "core.prune_failed_jobs",
        "schedule": 60 * 60 * 24,
    },
}

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "%(asctime)s %(levelname)s [%(name)s] %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": LOG_LEVEL,
    },
    "loggers": {
        "httpx": {"level": "WARNING"},
        "httpcore": {"level": "WARNING"},
    },
}
