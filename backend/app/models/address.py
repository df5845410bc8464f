"""
User address database model.
"""

from sqlalchemy import Column, String, Float, DateTime, ForeignKey
from sqlalchemy.sql import func
from backend.app.db.session import Base


class Address(Base):
    """
    Free-text address owned by a user, with optional coordinates.
    """
    __tablename__ = "user_addresses"

    id = Column(String(32), primary_key=True, index=True)

    # Ownership - the user must exist when the address is created
    user_id = Column(String(32), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    address = Column(String(1000), nullable=False)
    lat = Column(Float, nullable=True)
    lng = Column(Float, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<Address(id={self.id}, user_id={self.user_id})>"
