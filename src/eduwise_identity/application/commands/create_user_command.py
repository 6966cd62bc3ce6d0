import logging

from eduwise_auth import PasswordHashingService, WeakPasswordError
from eduwise_identity.domain.user import Email, User, UserRepository, UserRole
from eduwise_identity.exceptions import DuplicateEmailError, password_policy_error

logger = logging.getLogger(__name__)


class CreateUserCommand:
    """Command for an admin to create a user with any role.

    Accounts created this way are already verified.
    """

    def __init__(
        self,
        user_repository: UserRepository,
        password_service: PasswordHashingService,
    ):
        self._user_repo = user_repository
        self._password_service = password_service

    async def execute(
        self,
        full_name: str,
        email: str,
        password: str,
        role: UserRole = UserRole.USER,
    ) -> User:
        email_obj = Email(email)
        existing = await self._user_repo.find_by_email(email_obj)
        if existing:
            raise DuplicateEmailError(email_obj.value)

        try:
            password_hash = self._password_service.hash(password)
        except WeakPasswordError as e:
            raise password_policy_error(e) from e

        user = User.create(
            full_name=full_name,
            email=email_obj,
            password_hash=password_hash,
            role=role,
            email_verified=True,
        )
        await self._user_repo.save(user)

        logger.info("User created by admin: %s (role: %s)", user.email, role.value)
        return user
