"""Domain enumerations for the sopdesk application.

Enums represent fixed sets of domain values (roles, lifecycle statuses).
"""

from enum import Enum


class UserRole(str, Enum):
    """Role of an authenticated (non-employee) user.

    Admins own a tenant; staff is the default on first sight.
    """

    ADMIN = "admin"
    STAFF = "staff"


class EmployeeRole(str, Enum):
    """Role of an employee inside its owner's organization."""

    OWNER = "owner"
    MANAGER = "manager"
    STAFF = "staff"


class EmployeeStatus(str, Enum):
    """Employment status."""

    ACTIVE = "active"
    INACTIVE = "inactive"


class TrainingStatus(str, Enum):
    """Training video lifecycle. Transitions only from ACTIVE to COMPLETED."""

    ACTIVE = "active"
    COMPLETED = "completed"


class SubscriptionStatus(str, Enum):
    """Billing state driven by the payment gateway callback."""

    ACTIVE = "active"
    EXPIRED = "expired"
    CANCELLED = "cancelled"


class LogType(str, Enum):
    """Severity/category of a system log entry."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid log types as strings."""
        return [t.value for t in cls]
