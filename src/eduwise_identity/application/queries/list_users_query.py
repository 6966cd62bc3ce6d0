"""Query to list users."""

from typing import Optional

from eduwise_identity.domain.user import User, UserRepository, UserRole


class ListUsersQuery:
    """List all users, newest first, optionally filtered by role."""

    def __init__(self, user_repository: UserRepository):
        self._user_repo = user_repository

    async def execute(self, role: Optional[UserRole] = None) -> list[User]:
        return await self._user_repo.list_all(role=role)
