"""
Audit logging service for account and login events.

Provides centralized logging for security monitoring.
"""

from typing import Optional, Dict, Any
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, desc
from backend.app.models.audit_log import AuditLog


class AuditAction:
    """Standardized audit action constants."""
    USER_CREATED = "USER_CREATED"
    USER_UPDATED = "USER_UPDATED"
    USER_DELETED = "USER_DELETED"
    RIDER_REGISTERED = "RIDER_REGISTERED"
    ADDRESS_CREATED = "ADDRESS_CREATED"
    LOGIN_SUCCESS = "LOGIN_SUCCESS"
    LOGIN_FAILED = "LOGIN_FAILED"
    TOKEN_REVOKED = "TOKEN_REVOKED"


async def log_event(
    db: AsyncSession,
    action: str,
    user_id: Optional[str] = None,
    phone: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None
) -> AuditLog:
    """
    Log an account event to the audit log.

    Args:
        db: Database session
        action: Action being performed (use AuditAction constants)
        user_id: ID of the user the event concerns
        phone: Phone number involved (kept for failed logins)
        metadata: Additional context as JSON

    Returns:
        Created AuditLog instance
    """
    audit_log = AuditLog(
        action=action,
        user_id=user_id,
        phone=phone,
        meta_data=metadata
    )

    db.add(audit_log)
    await db.commit()
    await db.refresh(audit_log)

    return audit_log


async def get_user_audit_history(
    db: AsyncSession,
    user_id: str,
    limit: int = 50
) -> list[AuditLog]:
    """
    Get audit history for a specific user, most recent first.
    """
    query = select(AuditLog).where(
        AuditLog.user_id == user_id
    ).order_by(desc(AuditLog.timestamp), desc(AuditLog.id)).limit(limit)

    result = await db.execute(query)
    return list(result.scalars().all())
