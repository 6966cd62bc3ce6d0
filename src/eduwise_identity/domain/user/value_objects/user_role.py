from enum import Enum


class UserRole(str, Enum):
    """Platform roles. Only an admin can grant anything but USER."""

    USER = "user"
    INSTRUCTOR = "instructor"
    ADMIN = "admin"

    @property
    def is_staff(self) -> bool:
        return self in (UserRole.ADMIN, UserRole.INSTRUCTOR)
