"""Identity application services."""

from eduwise_identity.application.services.access_control_service import (
    AccessControlService,
)
from eduwise_identity.application.services.identity_lifecycle_service import (
    IdentityLifecycleService,
    LoginResult,
)

__all__ = [
    "AccessControlService",
    "IdentityLifecycleService",
    "LoginResult",
]
