"""
Notifications Module (``erp_modules.notifications``).

Which notification groups a role subscribes to, and through which
channels its users are notified.
"""

from erp_modules.notifications.models import (
    NotificationType,
    RoleNotificationsConfig,
    UserNotificationsGroup,
)

__all__ = [
    "NotificationType",
    "RoleNotificationsConfig",
    "UserNotificationsGroup",
]
