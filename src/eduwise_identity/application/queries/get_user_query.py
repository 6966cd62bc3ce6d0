"""Query to get a single user."""

from uuid import UUID

from eduwise_identity.application.context import UserContext
from eduwise_identity.domain.user import User, UserRepository
from eduwise_identity.exceptions import ForbiddenError, UserNotFoundError


class GetUserQuery:
    """Load a user the actor may see: themself, or anyone if staff."""

    def __init__(self, user_repository: UserRepository):
        self._user_repo = user_repository

    async def execute(self, user_id: UUID, actor: UserContext) -> User:
        if not actor.can_access_user(user_id):
            raise ForbiddenError(actor.role.value)

        user = await self._user_repo.find_by_id(user_id)
        if user is None:
            raise UserNotFoundError(str(user_id))
        return user
