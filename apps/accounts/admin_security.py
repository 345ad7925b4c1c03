from __future__ import annotations

import logging
from typing import Any

from django.db import transaction
from rest_framework.permissions import BasePermission

from .models import AuditLog, User

logger = logging.getLogger(__name__)


class RolePermission:
    PAYMENT_VIEW = "PAYMENT_VIEW"
    PAYMENT_VERIFY = "PAYMENT_VERIFY"
    REDEMPTION_VIEW = "REDEMPTION_VIEW"


ROLE_PERMISSION_MATRIX: dict[str, set[str]] = {
    User.Role.ADMIN: {
        RolePermission.PAYMENT_VIEW,
        RolePermission.PAYMENT_VERIFY,
        RolePermission.REDEMPTION_VIEW,
    },
    User.Role.ORGANIZER: {
        RolePermission.REDEMPTION_VIEW,
    },
    User.Role.USER: set(),
}


def get_role(user: User | None) -> str:
    if not user:
        return User.Role.USER
    if getattr(user, "is_superuser", False):
        return User.Role.ADMIN
    return getattr(user, "role", User.Role.USER) or User.Role.USER


def get_role_permissions(user: User | None) -> set[str]:
    if not user:
        return set()
    return set(ROLE_PERMISSION_MATRIX.get(get_role(user), set()))


def has_role_permission(user: User | None, permission: str) -> bool:
    return permission in get_role_permissions(user)


class RoleRBACPermission(BasePermission):
    """Grants access when the caller's role covers `view.required_permissions[method]`."""

    message = "You do not have permission to perform this action."

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False

        required = getattr(view, "required_permissions", None)
        if not required:
            return False

        required_for_method = required.get(request.method)
        if required_for_method is None:
            return False

        if isinstance(required_for_method, str):
            required_permissions = {required_for_method}
        else:
            required_permissions = set(required_for_method)

        missing = required_permissions - get_role_permissions(user)
        if missing:
            self.message = "The requested action requires additional permissions."
            return False
        return True


def get_client_ip(request) -> str:
    x_forwarded_for = request.META.get("HTTP_X_FORWARDED_FOR")
    if x_forwarded_for:
        return x_forwarded_for.split(",")[0].strip()
    return str(request.META.get("REMOTE_ADDR") or "")


def log_audit_event(
    request,
    *,
    action: str,
    target_type: str = "",
    target_id: str = "",
    before: dict[str, Any] | None = None,
    after: dict[str, Any] | None = None,
    metadata: dict[str, Any] | None = None,
    result: str = AuditLog.Result.SUCCESS,
    error_code: str = "",
) -> None:
    actor = request.user if request and getattr(request, "user", None) and request.user.is_authenticated else None
    client_ip = get_client_ip(request) if request else ""
    try:
        # Savepoint: a failed audit write must not poison the caller's transaction.
        with transaction.atomic():
            AuditLog.objects.create(
                actor=actor,
                actor_role=get_role(actor) if actor else "",
                action=action,
                target_type=target_type,
                target_id=str(target_id or ""),
                request_id=str(request.headers.get("X-Request-Id", "")) if request else "",
                ip=client_ip or None,
                user_agent=str(request.headers.get("User-Agent", "")) if request else "",
                before_json=before or {},
                after_json=after or {},
                metadata_json=metadata or {},
                result=result,
                error_code=error_code,
            )
    except Exception:
        logger.exception("audit log write failed: action=%s target=%s:%s", action, target_type, target_id)
