"""
Django settings for the weisus project.

Deployment-specific values come from environment variables; the defaults
are suitable for local development.
"""
import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


SECRET_KEY = os.environ.get("DJANGO_SECRET_KEY", "django-insecure-weisus-dev-key")

DEBUG = _env_bool("DJANGO_DEBUG", True)

ALLOWED_HOSTS = [
    host.strip()
    for host in os.environ.get("DJANGO_ALLOWED_HOSTS", "localhost,127.0.0.1,we-is-us.local,testserver").split(",")
    if host.strip()
]

INSTALLED_APPS = [
    'django.contrib.staticfiles',
    'content',
    'timeline',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'whitenoise.middleware.WhiteNoiseMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'weisus.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [BASE_DIR / 'templates'],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.request',
                'weisus.context_processors.site',
            ],
        },
    },
]

WSGI_APPLICATION = 'weisus.wsgi.application'

# No models are persisted; an in-memory database keeps Django's test runner happy.
DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'UTC'
USE_I18N = True
USE_TZ = True

STATIC_URL = 'static/'
STATIC_ROOT = BASE_DIR / 'staticfiles'
STATICFILES_DIRS = [BASE_DIR / 'static'] if (BASE_DIR / 'static').is_dir() else []

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

# Site
SITE_NAME = os.environ.get("WEISUS_SITE_NAME", "We Is Us Timeline")
SITE_TAGLINE = os.environ.get("WEISUS_SITE_TAGLINE", "Every scene, in order, at your own pace.")

# Content
EVENTS_DATA_DIR = Path(os.environ.get("WEISUS_EVENTS_DIR", BASE_DIR / 'data' / 'events'))
EVENTS_FILES = [p for p in os.environ.get("WEISUS_EVENTS_FILES", "").split(os.pathsep) if p]

# Next episode countdown (ISO 8601, UTC). Leave empty when nothing is scheduled.
NEXT_EPISODE_AIR_DATE = os.environ.get("WEISUS_NEXT_EPISODE_AIR_DATE", "")
NEXT_EPISODE_LABEL = os.environ.get("WEISUS_NEXT_EPISODE_LABEL", "")

LOG_LEVEL = os.environ.get("WEISUS_LOG_LEVEL", "DEBUG" if DEBUG else "INFO")

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'rich': {
            'format': '%(message)s',
            'datefmt': '[%X]',
        },
    },
    'handlers': {
        'rich': {
            'class': 'rich.logging.RichHandler',
            'formatter': 'rich',
            'rich_tracebacks': True,
        },
    },
    'root': {
        'handlers': ['rich'],
        'level': 'WARNING',
    },
    'loggers': {
        'django': {
            'handlers': ['rich'],
            'level': 'INFO',
            'propagate': False,
        },
        # App loggers propagate to the root handler.
        'content': {'level': LOG_LEVEL},
        'timeline': {'level': LOG_LEVEL},
        'weisus': {'level': LOG_LEVEL},
    },
}
