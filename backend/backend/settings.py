"""
Django settings for the grievance redressal backend.

Values that differ per deployment are read from the environment; the
defaults are suitable for local development and the test suite.

For more information on this file, see
https://docs.djangoproject.com/en/6.0/topics/settings/
"""

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent


def _env_bool(name: str, default: bool) -> bool:
    return os.environ.get(name, str(default)).lower() in ("1", "true", "yes")


SECRET_KEY = os.environ.get("DJANGO_SECRET_KEY", "django-insecure-pgr-local-development-key")

DEBUG = _env_bool("DJANGO_DEBUG", True)

ALLOWED_HOSTS = [h for h in os.environ.get("DJANGO_ALLOWED_HOSTS", "*").split(",") if h]


# ── Applications ─────────────────────────────────────────────────────

INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    # Third-party
    "rest_framework",
    "drf_spectacular",
    # Local
    "core",
    "pgr",
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

ROOT_URLCONF = "backend.urls"

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

WSGI_APPLICATION = "backend.wsgi.application"


# ── Database ─────────────────────────────────────────────────────────

DATABASES = {
    "default": {
        "ENGINE": os.environ.get("DB_ENGINE", "django.db.backends.sqlite3"),
        "NAME": os.environ.get("DB_NAME", str(BASE_DIR / "db.sqlite3")),
        "USER": os.environ.get("DB_USER", ""),
        "PASSWORD": os.environ.get("DB_PASSWORD", ""),
        "HOST": os.environ.get("DB_HOST", ""),
        "PORT": os.environ.get("DB_PORT", ""),
    }
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"


# ── Cache (business-service metadata) ────────────────────────────────

CACHES = {
    "default": {
        "BACKEND": os.environ.get(
            "CACHE_BACKEND", "django.core.cache.backends.locmem.LocMemCache"
        ),
        "LOCATION": os.environ.get("CACHE_LOCATION", "pgr-business-services"),
    }
}


# ── Internationalisation / static ────────────────────────────────────

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

STATIC_URL = "static/"
MEDIA_URL = "media/"
MEDIA_ROOT = BASE_DIR / "media"


# ── Django REST Framework ────────────────────────────────────────────
# Callers are authenticated by the platform gateway, which forwards the
# caller in ``RequestInfo.userInfo``.

REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PERMISSION_CLASSES": [
        "rest_framework.permissions.AllowAny",
    ],
    "DEFAULT_SCHEMA_CLASS": "drf_spectacular.openapi.AutoSchema",
    "EXCEPTION_HANDLER": "core.domain.exception_handler.domain_exception_handler",
    "UNAUTHENTICATED_USER": None,
}

SPECTACULAR_SETTINGS = {
    "TITLE": "PGR Services API",
    "DESCRIPTION": "Public grievance redressal: file, search and act on citizen complaints.",
    "VERSION": "2.0.0",
    "SERVE_INCLUDE_SCHEMA": False,
}


# ── Grievance service ────────────────────────────────────────────────
# Read through ``pgr.conf.PgrConfig.from_settings()``.

PGR = {
    "ALLOWED_SOURCES": os.environ.get("PGR_ALLOWED_SOURCES", "web,mobile"),
    "ALLOWED_CITIZEN_SEARCH_PARAMETERS": os.environ.get(
        "PGR_ALLOWED_CITIZEN_SEARCH_PARAMETERS",
        "serviceCode,serviceRequestId,applicationStatus,mobileNumber,ids",
    ),
    "ALLOWED_EMPLOYEE_SEARCH_PARAMETERS": os.environ.get(
        "PGR_ALLOWED_EMPLOYEE_SEARCH_PARAMETERS",
        "serviceCode,serviceRequestId,applicationStatus,mobileNumber,ids",
    ),
    "COMPLAIN_MAX_IDLE_TIME": int(os.environ.get("PGR_COMPLAIN_MAX_IDLE_TIME", 86_400_000)),
    "DEFAULT_LIMIT": int(os.environ.get("PGR_DEFAULT_LIMIT", 10)),
    "DEFAULT_OFFSET": int(os.environ.get("PGR_DEFAULT_OFFSET", 0)),
    "MAX_LIMIT": int(os.environ.get("PGR_MAX_LIMIT", 100)),
    "CREATE_TOPIC": os.environ.get("PGR_CREATE_TOPIC", "save-pgr-request"),
    "UPDATE_TOPIC": os.environ.get("PGR_UPDATE_TOPIC", "update-pgr-request"),
    "EVENT_SINK": os.environ.get("PGR_EVENT_SINK", "pgr.producer.PersisterEventSink"),
    "SERVICE_REQUEST_ID_GEN_NAME": os.environ.get("PGR_IDGEN_NAME", "pgr.servicerequestid"),
    "SERVICE_REQUEST_ID_GEN_FORMAT": os.environ.get(
        "PGR_IDGEN_FORMAT", "PB-PGR-[cy:yyyy-MM-dd]-[SEQ_EG_PGR_ID]"
    ),
    "BUSINESS_SERVICE": os.environ.get("PGR_BUSINESS_SERVICE", "PGR"),
    "MODULE_NAME": os.environ.get("PGR_MODULE_NAME", "RAINMAKER-PGR"),
    "BUSINESS_SERVICE_CACHE_TIMEOUT": (
        int(os.environ["PGR_BUSINESS_SERVICE_CACHE_TIMEOUT"])
        if os.environ.get("PGR_BUSINESS_SERVICE_CACHE_TIMEOUT") else None
    ),
    "USER_HOST": os.environ.get("EGOV_USER_HOST", "http://egov-user:8080"),
    "WORKFLOW_HOST": os.environ.get("EGOV_WORKFLOW_HOST", "http://egov-workflow-v2:8080"),
    "MDMS_HOST": os.environ.get("EGOV_MDMS_HOST", "http://egov-mdms-service:8080"),
    "HRMS_HOST": os.environ.get("EGOV_HRMS_HOST", "http://egov-hrms:8080"),
    "IDGEN_HOST": os.environ.get("EGOV_IDGEN_HOST", "http://egov-idgen:8080"),
    "HTTP_TIMEOUT": float(os.environ.get("PGR_HTTP_TIMEOUT", 10.0)),
}


# ── Logging ──────────────────────────────────────────────────────────

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
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
        "level": "WARNING",
    },
    "loggers": {
        name: {
            "handlers": ["console"],
            "level": os.environ.get("PGR_LOG_LEVEL", "INFO"),
            "propagate": False,
        }
        for name in ("core", "identity", "workflow", "mdms", "pgr")
    },
}
