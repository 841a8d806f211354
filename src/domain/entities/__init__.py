"""
Feedback Talent Domain Entities

All domain entities organized by model.
Each entity in its own file for better maintainability.
"""

# Export all enums
from .enums import UserRole, ResetStatus, LIVE_RESET_STATUSES

# Export all entities
from .user import User
from .password_reset import PasswordReset
from .audit_event import AuditEvent

__all__ = [
    # Enums
    "UserRole",
    "ResetStatus",
    "LIVE_RESET_STATUSES",
    # Entities
    "User",
    "PasswordReset",
    "AuditEvent",
]
