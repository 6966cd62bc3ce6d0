from uuid import UUID

from eduwise_identity.domain.user import UserRepository
from eduwise_identity.exceptions import CannotDeleteSelfError, UserNotFoundError


class DeleteUserCommand:
    """Command to delete a user."""

    def __init__(self, user_repository: UserRepository):
        self._user_repo = user_repository

    async def execute(self, user_id: UUID, requesting_admin_id: UUID) -> None:
        if user_id == requesting_admin_id:
            raise CannotDeleteSelfError

        user = await self._user_repo.find_by_id(user_id)
        if not user:
            raise UserNotFoundError(str(user_id))

        await self._user_repo.delete(user_id)
