"""
User database model.

Passengers and riders share this table and are told apart by ``role``.
"""

from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func
from backend.app.db.session import Base
from backend.app.models.enums import UserRole


class User(Base):
    """
    User model for registration and login.

    ``id`` is the string form of a value issued by the ``user_seq``
    sequence. ``phone`` is unique; the index backs the duplicate guard.
    """
    __tablename__ = "users"

    id = Column(String(32), primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    hashed_password = Column(String(255), nullable=False)
    phone = Column(String(32), unique=True, index=True, nullable=False)
    picture = Column(String(1000), nullable=True)
    role = Column(Integer, default=int(UserRole.PASSENGER), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<User(id={self.id}, name='{self.name}', phone='{self.phone}', role={self.role})>"
