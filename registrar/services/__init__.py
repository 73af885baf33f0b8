"""
Services module containing registration workflows.
"""

from .enrollment_service import EnrollmentService, EnrollmentResult, EventLog

__all__ = [
    "EnrollmentService",
    "EnrollmentResult",
    "EventLog",
]
