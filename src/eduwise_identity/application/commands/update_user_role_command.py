from uuid import UUID

from eduwise_identity.domain.user import User, UserRepository, UserRole
from eduwise_identity.exceptions import CannotDemoteSelfError, UserNotFoundError


class UpdateUserRoleCommand:
    """Command to update a user's role. Only reachable by admins."""

    def __init__(self, user_repository: UserRepository):
        self._user_repo = user_repository

    async def execute(
        self,
        user_id: UUID,
        new_role: UserRole,
        requesting_admin_id: UUID,
    ) -> User:
        if user_id == requesting_admin_id and new_role != UserRole.ADMIN:
            raise CannotDemoteSelfError

        user = await self._user_repo.find_by_id(user_id)
        if not user:
            raise UserNotFoundError(str(user_id))

        user.change_role(new_role)
        await self._user_repo.save(user)
        return user
