from typing import Optional, Union
from uuid import UUID

from eduwise_identity.application.context import UserContext
from eduwise_identity.domain.user import Email, User, UserRepository, UserRole
from eduwise_identity.exceptions import (
    DuplicateEmailError,
    ForbiddenError,
    RoleChangeNotAllowedError,
    UserNotFoundError,
)


class UpdateUserProfileCommand:
    """Command to update a user's name or email.

    The user themself or an admin may do this. A role in the payload is
    accepted only if it equals the current role; role changes go through
    UpdateUserRoleCommand.
    """

    def __init__(self, user_repository: UserRepository):
        self._user_repo = user_repository

    async def execute(
        self,
        user_id: UUID,
        actor: UserContext,
        full_name: Optional[str] = None,
        email: Optional[str] = None,
        role: Union[str, UserRole, None] = None,
    ) -> User:
        if actor.user_id != user_id and not actor.is_admin:
            raise ForbiddenError(actor.role.value)

        user = await self._user_repo.find_by_id(user_id)
        if not user:
            raise UserNotFoundError(str(user_id))

        if role is not None and role != user.role:
            raise RoleChangeNotAllowedError

        new_email = Email(email) if email is not None else None
        if new_email is not None and new_email.value != user.email:
            if await self._user_repo.exists_by_email(new_email):
                raise DuplicateEmailError(new_email.value)

        user.update_profile(full_name=full_name, email=new_email)
        await self._user_repo.save(user)
        return user
