from __future__ import annotations

import logging

from django.conf import settings
from django.core.cache import caches
from django.db import connections
from django.db.utils import OperationalError
from django.http import JsonResponse
from django.utils import timezone

logger = logging.getLogger(__name__)


def healthz(_request):
    database_ok = True
    cache_ok = True

    try:
        with connections["default"].cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()
    except OperationalError:
        logger.warning("healthz database check failed", exc_info=True)
        database_ok = False

    if getattr(settings, "USE_REDIS_CACHE", False):
        try:
            cache = caches["default"]
            cache.set("healthz:cache", "ok", timeout=5)
            cache_ok = cache.get("healthz:cache") == "ok"
        except Exception:
            logger.warning("healthz cache check failed", exc_info=True)
            cache_ok = False

    checks = {
        "database": "ok" if database_ok else "error",
        "cache": "ok" if cache_ok else "error",
    }

    status_code = 200 if all(v == "ok" for v in checks.values()) else 503
    return JsonResponse(
        {
            "status": "ok" if status_code == 200 else "degraded",
            "timestamp": timezone.now().isoformat(),
            "checks": checks,
        },
        status=status_code,
    )
