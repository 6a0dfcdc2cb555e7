"""
Tests for the package-level entry points used by schedulers.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

import mongo_membership


@pytest.mark.asyncio
async def test_entry_points_delegate_to_services():
    session = MagicMock()

    with patch("mongo_membership.connection_gateway") as gateway, \
         patch("mongo_membership.config_store") as store, \
         patch("mongo_membership.initialization_controller") as controller, \
         patch("mongo_membership.membership_reconciler") as reconciler, \
         patch("mongo_membership.membership_probe") as probe:
        gateway.connect = AsyncMock(return_value=session)
        store.get_status = AsyncMock(return_value={"ok": 1})
        controller.init = AsyncMock(return_value={"ok": 1})
        reconciler.reconcile = AsyncMock(return_value={"ok": 1})
        probe.is_member = AsyncMock(return_value=True)

        assert await mongo_membership.connect() is session
        assert await mongo_membership.get_status(session) == {"ok": 1}
        await mongo_membership.init(session, "10.0.0.5:27017", True)
        await mongo_membership.reconcile(session, ["B:27017"], ["C:27017"], force=True)
        assert await mongo_membership.is_member("10.0.0.5:27017") is True

    gateway.connect.assert_awaited_once_with(None)
    controller.init.assert_awaited_once_with(session, "10.0.0.5:27017", True)
    reconciler.reconcile.assert_awaited_once_with(session, ["B:27017"], ["C:27017"], True)
    probe.is_member.assert_awaited_once_with("10.0.0.5:27017")
