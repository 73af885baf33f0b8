"""
Enumerations for the registrar.
"""

from enum import Enum


class EntityStatus(Enum):
    """Status of an entity in the system."""
    ACTIVE = "active"


class EnrollmentStatus(Enum):
    """Outcome of a registration operation."""
    CONFIRMED = "confirmed"
    WAITLISTED = "waitlisted"
    DROPPED = "dropped"
    LIMIT_CHANGED = "limit_changed"
    REJECTED = "rejected"


class EventType(Enum):
    """Types of registration events."""
    ENROLLED = "enrolled"
    WAITLISTED = "waitlisted"
    PROMOTED = "promoted"
    DROPPED = "dropped"
    LIMIT_CHANGED = "limit_changed"
