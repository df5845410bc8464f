"""
Database seeding script for demo accounts.

Creates one passenger and one rider (with a vehicle) for local development.
Run this script after the database is reachable.
"""

import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from backend.app.db.session import AsyncSessionLocal, Base, engine
from backend.app.services import rider_service, user_service
from backend.app.services.sequence_allocator import SequenceAllocator

# Imported for table registration
from backend.app.models import address, audit_log, rider_vehicle, sequence_counter  # noqa: F401

PASSENGER_PHONE = "0800000001"
RIDER_PHONE = "0800000002"


async def seed_users():
    """
    Seed demo users.

    Creates:
    - 1 passenger (phone 0800000001, password passenger123)
    - 1 rider with a Sedan (phone 0800000002, password rider123)
    """
    allocator = SequenceAllocator(AsyncSessionLocal)

    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        async with AsyncSessionLocal() as db:
            print("Starting user seeding...")

            if await user_service.find_user_by_phone(db, PASSENGER_PHONE):
                print("Demo passenger already exists, skipping seeding")
                return

            passenger = await user_service.create_user(
                db, allocator, name="Demo Passenger", password="passenger123", phone=PASSENGER_PHONE
            )
            print(f"Created passenger {passenger.id} (phone: {PASSENGER_PHONE}, password: passenger123)")

            rider, car = await rider_service.register_rider(
                db,
                allocator,
                name="Demo Rider",
                password="rider123",
                phone=RIDER_PHONE,
                plate_number="DEMO-001",
                car_type="Sedan",
            )
            print(f"Created rider {rider.id} with car {car.id} (phone: {RIDER_PHONE}, password: rider123)")

            print("User seeding completed")
    finally:
        await engine.dispose()


if __name__ == "__main__":
    asyncio.run(seed_users())
