"""
User roles enumeration.

Defines the role types for the rider registry.
"""

import enum


class UserRole(enum.IntEnum):
    """
    User role enumeration.

    Stored and exchanged as plain integers.

    Roles:
        PASSENGER: Books rides (default role)
        RIDER: Drives a registered vehicle
    """
    PASSENGER = 0
    RIDER = 1
