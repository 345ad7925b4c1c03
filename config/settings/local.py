from .base import *  # noqa: F403,F401
from django.core.exceptions import ImproperlyConfigured
from urllib.parse import urlparse

DEBUG = True
ALLOWED_HOSTS = ["*"]
CORS_ALLOW_ALL_ORIGINS = True

LOCAL_DB_HOSTS = {"", "127.0.0.1", "localhost", "db"}
LOCAL_REDIS_HOSTS = {"", "127.0.0.1", "localhost", "redis"}


def _guard_local_host(kind: str, host: str, allowed: set[str], opt_in_flag: str) -> None:
    if host.strip().lower() in allowed or env_bool(opt_in_flag, False):
        return
    raise ImproperlyConfigured(
        f"Local settings blocked remote {kind} host '{host}'. "
        f"Set {opt_in_flag}=true only when intentionally using a remote {kind}."
    )


if env("DB_ENGINE", "sqlite3") == "postgresql":
    _guard_local_host("DB", str(DATABASES["default"].get("HOST", "")), LOCAL_DB_HOSTS, "ALLOW_REMOTE_DB_IN_LOCAL")

if USE_REDIS_CACHE:
    _guard_local_host(
        "Redis",
        urlparse(REDIS_CACHE_URL).hostname or "",
        LOCAL_REDIS_HOSTS,
        "ALLOW_REMOTE_REDIS_IN_LOCAL",
    )

LOGGING["loggers"] = {
    "apps": {"level": env("APPS_LOG_LEVEL", "DEBUG")},
    # SQL echo for tracing lock order in checkout/settlement.
    "django.db.backends": {"level": "DEBUG" if env_bool("LOG_SQL", False) else "INFO"},
}
