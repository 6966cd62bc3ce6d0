"""Administrative user commands."""

from eduwise_identity.application.commands.create_user_command import (
    CreateUserCommand,
)
from eduwise_identity.application.commands.delete_user_command import (
    DeleteUserCommand,
)
from eduwise_identity.application.commands.update_user_profile_command import (
    UpdateUserProfileCommand,
)
from eduwise_identity.application.commands.update_user_role_command import (
    UpdateUserRoleCommand,
)

__all__ = [
    "CreateUserCommand",
    "DeleteUserCommand",
    "UpdateUserProfileCommand",
    "UpdateUserRoleCommand",
]
