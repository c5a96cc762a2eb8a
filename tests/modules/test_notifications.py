"""Tests for role notification configuration."""

from dataclasses import FrozenInstanceError

import pytest

from erp_modules.notifications import (
    NotificationType,
    RoleNotificationsConfig,
    UserNotificationsGroup,
)

SHIPMENTS = UserNotificationsGroup(
    "shipments", {NotificationType.NOTICE, NotificationType.EMAIL}
)
INVOICES = UserNotificationsGroup("invoices", [NotificationType.EMAIL])


class TestUserNotificationsGroup:
    def test_types_stored_as_frozenset(self):
        assert INVOICES.notification_types == frozenset({NotificationType.EMAIL})
        assert isinstance(INVOICES.notification_types, frozenset)

    def test_is_notify_by(self):
        assert INVOICES.is_notify_by(NotificationType.EMAIL)
        assert not INVOICES.is_notify_by(NotificationType.NOTICE)

    def test_no_types_by_default(self):
        group = UserNotificationsGroup("silent")
        assert not group.is_notify_by(NotificationType.NOTICE)

    def test_empty_name_rejected(self):
        with pytest.raises(ValueError):
            UserNotificationsGroup("")

    def test_equal_regardless_of_input_collection(self):
        assert UserNotificationsGroup("x", [NotificationType.EMAIL]) == UserNotificationsGroup(
            "x", (NotificationType.EMAIL,)
        )


class TestRoleNotificationsConfig:
    def test_of_keeps_order(self):
        config = RoleNotificationsConfig.of(1000000, [SHIPMENTS, INVOICES])
        assert config.role_id == 1000000
        assert config.notification_groups == (SHIPMENTS, INVOICES)

    def test_groups_stored_as_tuple(self):
        config = RoleNotificationsConfig(0, [SHIPMENTS])
        assert isinstance(config.notification_groups, tuple)

    def test_system_role_allowed(self):
        assert RoleNotificationsConfig(0).notification_groups == ()

    def test_negative_role_rejected(self):
        with pytest.raises(ValueError, match="role_id"):
            RoleNotificationsConfig(-1)

    def test_get_group(self):
        config = RoleNotificationsConfig.of(5, [SHIPMENTS, INVOICES])
        assert config.get_group("invoices") is INVOICES
        assert config.get_group("unknown") is None

    def test_frozen(self):
        config = RoleNotificationsConfig(5)
        with pytest.raises(FrozenInstanceError):
            config.role_id = 6
