"""
Audit Log Database Model.

Tracks registration, login and account changes for security monitoring.
"""

from sqlalchemy import Column, Integer, String, DateTime, JSON
from sqlalchemy.sql import func
from backend.app.db.session import Base


class AuditLog(Base):
    """
    Audit log model for tracking account events.

    Events logged:
    - USER_CREATED / USER_UPDATED / USER_DELETED
    - RIDER_REGISTERED / ADDRESS_CREATED
    - LOGIN_SUCCESS / LOGIN_FAILED
    - TOKEN_REVOKED
    """
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # What action was performed
    action = Column(String(100), nullable=False, index=True)

    # Which user the event concerns (None when the phone matched nobody)
    user_id = Column(String(32), index=True, nullable=True)
    phone = Column(String(32), nullable=True)

    # Additional context (JSON for flexibility)
    meta_data = Column(JSON, nullable=True)

    timestamp = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    def __repr__(self):
        return f"<AuditLog(id={self.id}, action='{self.action}', user_id={self.user_id})>"
