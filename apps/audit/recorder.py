"""
AuditRecorder: appends one AuditLog row per mutating action.
Fails silently: never blocks the main flow.
"""

import logging

from django.db import transaction

from .models import AuditLog

logger = logging.getLogger("docketflow.audit")


def request_origin(request) -> dict:
    """Client IP and user agent of an incoming request."""
    forwarded = request.META.get("HTTP_X_FORWARDED_FOR", "")
    ip = forwarded.split(",")[0].strip() if forwarded else request.META.get("REMOTE_ADDR", "")
    return {
        "ip":         ip or "",
        "user_agent": request.META.get("HTTP_USER_AGENT", ""),
    }


def acting_user(actor):
    """The actor if it is an authenticated user, else None (a system action)."""
    if actor is not None and getattr(actor, "is_authenticated", False):
        return actor
    return None


class AuditRecorder:

    def record(self, action: str, entity_type: str = "", entity_id=None, summary: str = "",
               meta: dict = None, actor=None, origin: dict = None):
        """
        Persist one audit event. Returns the AuditLog, or None when the write failed.
        The write runs in its own savepoint so a failure cannot poison the caller's transaction.
        """
        user = acting_user(actor)
        origin = origin or {}
        try:
            with transaction.atomic():
                entry = AuditLog.objects.create(
                    user        = user,
                    username    = user.get_username() if user else AuditLog.SYSTEM_ACTOR,
                    action      = action,
                    entity_type = entity_type or "",
                    entity_id   = entity_id,
                    summary     = summary or "",
                    meta        = meta or {},
                    ip          = (origin.get("ip") or "")[:64],
                    user_agent  = origin.get("user_agent") or "",
                )
        except Exception:
            logger.exception("Audit write failed for %s %s#%s", action, entity_type, entity_id)
            return None
        logger.debug("Audit %s %s#%s by %s", action, entity_type, entity_id, entry.username)
        return entry
