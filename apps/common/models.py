from __future__ import annotations

from django.db import models


class RecordState(models.TextChoices):
    """Soft-delete tombstone. Rows are never hard-deleted while ACTIVE is expected."""

    ACTIVE = "ACTIVE", "ACTIVE"
    DELETED = "DELETED", "DELETED"
