from .base import *  # noqa: F403,F401

DEBUG = False
ALLOWED_HOSTS = ["*"]

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "bookify-test-cache",
    }
}

LOGGING["root"]["level"] = env("TEST_LOG_LEVEL", "WARNING")  # noqa: F405
