"""
Role notification configuration.

A role lists the notification groups its users receive and, per group,
the channels the notifications are delivered through.  Both types are
frozen; group lists are stored as tuples.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum


class NotificationType(str, Enum):
    """Delivery channel of a user notification."""

    NOTICE = "notice"
    EMAIL = "email"


@dataclass(frozen=True)
class UserNotificationsGroup:
    group_internal_name: str
    notification_types: frozenset[NotificationType] = frozenset()

    def __post_init__(self) -> None:
        if not self.group_internal_name:
            raise ValueError("group_internal_name must not be empty")
        object.__setattr__(
            self, "notification_types", frozenset(self.notification_types)
        )

    def is_notify_by(self, notification_type: NotificationType) -> bool:
        return notification_type in self.notification_types


@dataclass(frozen=True)
class RoleNotificationsConfig:
    """
    Notification groups configured for one role.

    ``role_id`` must be zero or positive; 0 is the system role.
    """

    role_id: int
    notification_groups: tuple[UserNotificationsGroup, ...] = ()

    def __post_init__(self) -> None:
        if self.role_id < 0:
            raise ValueError(f"role_id must be >= 0, got {self.role_id}")
        object.__setattr__(
            self, "notification_groups", tuple(self.notification_groups)
        )

    @classmethod
    def of(
        cls, role_id: int, groups: Iterable[UserNotificationsGroup]
    ) -> RoleNotificationsConfig:
        return cls(role_id=role_id, notification_groups=tuple(groups))

    def get_group(self, group_internal_name: str) -> UserNotificationsGroup | None:
        for group in self.notification_groups:
            if group.group_internal_name == group_internal_name:
                return group
        return None
