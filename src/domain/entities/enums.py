"""
Feedback Talent Domain Enums

All enumeration types used across domain entities.
"""

from enum import Enum


class UserRole(str, Enum):
    """Kind of account"""

    employee = "employee"
    candidate = "candidate"
    company = "company"


class ResetStatus(str, Enum):
    """Password reset request lifecycle"""

    pending = "pending"
    verified = "verified"
    used = "used"
    expired = "expired"


LIVE_RESET_STATUSES = (ResetStatus.pending, ResetStatus.verified)
