"""
PATH: backend/settings/base.py

BASE SETTINGS (shared by dev + prod)

Covers:
- django-environ driven config (.env supported)
- DRF + SimpleJWT (bearer) + users-service session cookie auth
- Throttling scopes for auth, polling and the M-Pesa callback
- Storefront money rules (currency, shipping)
- M-Pesa Daraja credentials + payment timeout window
- Logging (stdlib dictConfig) and optional Sentry
"""

from __future__ import annotations

import sys
from datetime import timedelta
from pathlib import Path

import environ
from corsheaders.defaults import default_headers, default_methods

# -----------------------------------------
# BASE DIRECTORY
# -----------------------------------------
BASE_DIR = Path(__file__).resolve().parent.parent.parent

# -----------------------------------------
# TEST MODE DETECTION
# -----------------------------------------
TESTING = "test" in sys.argv or "pytest" in sys.modules

# -----------------------------------------
# ENV (django-environ)
# -----------------------------------------
env = environ.Env(
    DEBUG=(bool, True),
    SECRET_KEY=(str, ""),
    TIME_ZONE=(str, "Africa/Nairobi"),
    ALLOWED_HOSTS=(list, ["localhost", "127.0.0.1"]),
    CORS_ALLOWED_ORIGINS=(list, ["http://localhost:5173"]),
    CSRF_TRUSTED_ORIGINS=(list, ["http://localhost:5173"]),
    DATABASE_URL=(str, f"sqlite:///{BASE_DIR / 'db.sqlite3'}"),
    ADMIN_PATH=(str, "admin/"),
    LOG_LEVEL=(str, "INFO"),
    # JWT
    JWT_SIGNING_KEY=(str, ""),
    JWT_ACCESS_MINUTES=(int, 60),
    JWT_REFRESH_DAYS=(int, 7),
    # External users service (Google OAuth broker)
    USERS_SERVICE_API_URL=(str, ""),
    USERS_SERVICE_API_KEY=(str, ""),
    USERS_SERVICE_TIMEOUT=(int, 15),
    SESSION_TOKEN_COOKIE_NAME=(str, "lethashop_session_token"),
    SESSION_TOKEN_MAX_AGE_DAYS=(int, 60),
    # Shop rules
    SHOP_CURRENCY=(str, "KES"),
    SHOP_FREE_SHIPPING_THRESHOLD=(str, "150.00"),
    SHOP_FLAT_SHIPPING_FEE=(str, "15.00"),
    ADMIN_EMAIL_DOMAINS=(list, ["lethashop.com"]),
    # M-Pesa (Daraja)
    MPESA_ENVIRONMENT=(str, "sandbox"),
    MPESA_CONSUMER_KEY=(str, ""),
    MPESA_CONSUMER_SECRET=(str, ""),
    MPESA_SHORTCODE=(str, "174379"),
    MPESA_PASSKEY=(str, ""),
    MPESA_CALLBACK_URL=(str, ""),
    MPESA_CALLBACK_TOKEN=(str, ""),
    MPESA_TRANSACTION_TYPE=(str, "CustomerPayBillOnline"),
    MPESA_REQUEST_TIMEOUT=(int, 30),
    MPESA_PAYMENT_TIMEOUT_SECONDS=(int, 300),
    # Throttling
    THROTTLE_ANON_RATE=(str, "60/min"),
    THROTTLE_USER_RATE=(str, "600/min"),
    THROTTLE_AUTH_RATE=(str, "20/min"),
    THROTTLE_CATALOG_RATE=(str, "240/min"),
    THROTTLE_PAYMENT_POLL_RATE=(str, "120/min"),
    THROTTLE_PAYMENT_WRITE_RATE=(str, "10/min"),
    THROTTLE_WEBHOOK_RATE=(str, "600/min"),
    # Sentry (optional; enable by setting SENTRY_DSN)
    SENTRY_DSN=(str, ""),
    SENTRY_ENVIRONMENT=(str, "development"),
    SENTRY_TRACES_SAMPLE_RATE=(float, 0.0),
    SENTRY_SEND_PII=(bool, False),
)

# -----------------------------------------
# LOAD .env
# -----------------------------------------
env_file_1 = BASE_DIR / ".env"
env_file_2 = BASE_DIR.parent / ".env"

if env_file_1.exists():
    env.read_env(str(env_file_1))
elif env_file_2.exists():
    env.read_env(str(env_file_2))

# -----------------------------------------
# CORE SECURITY
# -----------------------------------------
SECRET_KEY = (env("SECRET_KEY") or "dev-insecure-change-me").strip()
DEBUG = env.bool("DEBUG")
ALLOWED_HOSTS = env.list("ALLOWED_HOSTS")
ADMIN_PATH = (env("ADMIN_PATH") or "admin/").strip()

# -----------------------------------------
# I18N / TZ
# -----------------------------------------
LANGUAGE_CODE = "en-us"
TIME_ZONE = (env("TIME_ZONE") or "UTC").strip()
USE_I18N = True
USE_TZ = True

# -----------------------------------------
# AUTH USER MODEL (custom)
# -----------------------------------------
AUTH_USER_MODEL = "users.User"

# -----------------------------------------
# INSTALLED APPS
# -----------------------------------------
INSTALLED_APPS = [
    "corsheaders",
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "rest_framework",
    "rest_framework_simplejwt",
    "rest_framework_simplejwt.token_blacklist",
    "drf_spectacular",
    "django_filters",
    "users.apps.UsersConfig",
    "products.apps.ProductsConfig",
    "cart.apps.CartConfig",
    "orders.apps.OrdersConfig",
    "payments.apps.PaymentsConfig",
]

# -----------------------------------------
# MIDDLEWARE
# -----------------------------------------
MIDDLEWARE = [
    "corsheaders.middleware.CorsMiddleware",
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "backend.urls"
WSGI_APPLICATION = "backend.wsgi.application"
APPEND_SLASH = True

# -----------------------------------------
# TEMPLATES (required for Django admin)
# -----------------------------------------
TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [str(BASE_DIR / "templates")],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    }
]

# -----------------------------------------
# CACHE (throttle counters)
# -----------------------------------------
# Tests use a dummy cache so throttle history never leaks between test cases.
CACHES = {
    "default": {
        "BACKEND": (
            "django.core.cache.backends.dummy.DummyCache"
            if TESTING
            else "django.core.cache.backends.locmem.LocMemCache"
        ),
    }
}

# -----------------------------------------
# REST FRAMEWORK
# -----------------------------------------
REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": (
        "rest_framework_simplejwt.authentication.JWTAuthentication",
        "users.authentication.SessionTokenAuthentication",
    ),
    "DEFAULT_PERMISSION_CLASSES": ("rest_framework.permissions.IsAuthenticated",),
    "DEFAULT_FILTER_BACKENDS": ("django_filters.rest_framework.DjangoFilterBackend",),
    "DEFAULT_PAGINATION_CLASS": "rest_framework.pagination.PageNumberPagination",
    "PAGE_SIZE": 20,
    "DEFAULT_SCHEMA_CLASS": "drf_spectacular.openapi.AutoSchema",
    "DEFAULT_THROTTLE_CLASSES": (
        "rest_framework.throttling.AnonRateThrottle",
        "rest_framework.throttling.UserRateThrottle",
    ),
    "DEFAULT_THROTTLE_RATES": {
        "anon": env("THROTTLE_ANON_RATE"),
        "user": env("THROTTLE_USER_RATE"),
        "auth": env("THROTTLE_AUTH_RATE"),
        "catalog": env("THROTTLE_CATALOG_RATE"),
        "payment_poll": env("THROTTLE_PAYMENT_POLL_RATE"),
        "payment_write": env("THROTTLE_PAYMENT_WRITE_RATE"),
        "webhook": env("THROTTLE_WEBHOOK_RATE"),
    },
}

# -----------------------------------------
# SIMPLE JWT
# -----------------------------------------
SIMPLE_JWT = {
    "ACCESS_TOKEN_LIFETIME": timedelta(minutes=env.int("JWT_ACCESS_MINUTES")),
    "REFRESH_TOKEN_LIFETIME": timedelta(days=env.int("JWT_REFRESH_DAYS")),
    "ROTATE_REFRESH_TOKENS": True,
    "BLACKLIST_AFTER_ROTATION": True,
    "SIGNING_KEY": (env("JWT_SIGNING_KEY") or SECRET_KEY).strip(),
    "AUTH_HEADER_TYPES": ("Bearer",),
}

# -----------------------------------------
# DATABASE
# -----------------------------------------
DATABASES = {
    "default": env.db("DATABASE_URL"),
}

# -----------------------------------------
# USERS SERVICE (OAuth broker)
# -----------------------------------------
USERS_SERVICE = {
    "API_URL": (env("USERS_SERVICE_API_URL") or "").strip().rstrip("/"),
    "API_KEY": (env("USERS_SERVICE_API_KEY") or "").strip(),
    "TIMEOUT": env.int("USERS_SERVICE_TIMEOUT"),
    "SESSION_COOKIE_NAME": (env("SESSION_TOKEN_COOKIE_NAME") or "").strip()
    or "lethashop_session_token",
    "COOKIE_MAX_AGE": env.int("SESSION_TOKEN_MAX_AGE_DAYS") * 24 * 60 * 60,
}

# -----------------------------------------
# SHOP RULES
# -----------------------------------------
SHOP = {
    "CURRENCY": (env("SHOP_CURRENCY") or "KES").strip().upper(),
    "FREE_SHIPPING_THRESHOLD": env("SHOP_FREE_SHIPPING_THRESHOLD"),
    "FLAT_SHIPPING_FEE": env("SHOP_FLAT_SHIPPING_FEE"),
    "ADMIN_EMAIL_DOMAINS": [
        d.strip().lower().lstrip("@") for d in env.list("ADMIN_EMAIL_DOMAINS") if d.strip()
    ],
}

# -----------------------------------------
# M-PESA (Safaricom Daraja STK Push)
# -----------------------------------------
MPESA = {
    "ENVIRONMENT": (env("MPESA_ENVIRONMENT") or "sandbox").strip().lower(),
    "CONSUMER_KEY": (env("MPESA_CONSUMER_KEY") or "").strip(),
    "CONSUMER_SECRET": (env("MPESA_CONSUMER_SECRET") or "").strip(),
    "SHORTCODE": (env("MPESA_SHORTCODE") or "").strip(),
    "PASSKEY": (env("MPESA_PASSKEY") or "").strip(),
    "CALLBACK_URL": (env("MPESA_CALLBACK_URL") or "").strip(),
    "CALLBACK_TOKEN": (env("MPESA_CALLBACK_TOKEN") or "").strip(),
    "TRANSACTION_TYPE": (env("MPESA_TRANSACTION_TYPE") or "CustomerPayBillOnline").strip(),
    "REQUEST_TIMEOUT": env.int("MPESA_REQUEST_TIMEOUT"),
    "PAYMENT_TIMEOUT_SECONDS": env.int("MPESA_PAYMENT_TIMEOUT_SECONDS"),
}

# -----------------------------------------
# LOGGING
# -----------------------------------------
LOG_LEVEL = (env("LOG_LEVEL") or "INFO").strip().upper()

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "standard": {
            "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "standard",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": "WARNING",
    },
    "loggers": {
        "django": {"handlers": ["console"], "level": "WARNING", "propagate": False},
        "users": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
        "products": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
        "cart": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
        "orders": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
        "payments": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
    },
}

# -----------------------------------------
# SENTRY (optional)
# -----------------------------------------
SENTRY_DSN = (env("SENTRY_DSN") or "").strip()
SENTRY_ENVIRONMENT = (env("SENTRY_ENVIRONMENT") or "development").strip()
SENTRY_TRACES_SAMPLE_RATE = float(env("SENTRY_TRACES_SAMPLE_RATE"))
SENTRY_SEND_PII = env.bool("SENTRY_SEND_PII")

if SENTRY_DSN:
    import sentry_sdk
    from sentry_sdk.integrations.django import DjangoIntegration

    sentry_sdk.init(
        dsn=SENTRY_DSN,
        environment=SENTRY_ENVIRONMENT,
        integrations=[DjangoIntegration()],
        traces_sample_rate=SENTRY_TRACES_SAMPLE_RATE,
        send_default_pii=SENTRY_SEND_PII,
    )

# -----------------------------------------
# CORS / CSRF
# -----------------------------------------
CORS_ALLOWED_ORIGINS = env.list("CORS_ALLOWED_ORIGINS")
CORS_ALLOW_CREDENTIALS = True
CORS_ALLOW_METHODS = list(default_methods)
CORS_ALLOW_HEADERS = list(default_headers)

CSRF_TRUSTED_ORIGINS = env.list("CSRF_TRUSTED_ORIGINS")

# -----------------------------------------
# STATIC FILES
# -----------------------------------------
STATIC_URL = "static/"
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# -----------------------------------------
# SWAGGER
# -----------------------------------------
SPECTACULAR_SETTINGS = {
    "TITLE": "LethaShop API",
    "DESCRIPTION": "Leather goods storefront: catalog, cart, orders, M-Pesa payments and admin",
    "VERSION": "1.0.0",
    "SERVE_INCLUDE_SCHEMA": False,
}
