"""
Rider vehicle database model.

Riders register the car they drive as part of rider registration.
"""

from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.sql import func
from backend.app.db.session import Base


class RiderVehicle(Base):
    """
    Rider vehicle model.

    One row per rider in practice; ``user_id`` points at a user with
    role RIDER.
    """
    __tablename__ = "rider_cars"

    id = Column(String(32), primary_key=True, index=True)

    # Ownership - Vehicle belongs to a rider
    user_id = Column(String(32), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    # Vehicle identification
    plate_number = Column(String(50), nullable=False)
    car_type = Column(String(100), nullable=False)  # e.g., "Sedan", "Motorbike"
    image_car = Column(String(1000), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<RiderVehicle(id={self.id}, plate='{self.plate_number}', user_id={self.user_id})>"
