"""
# Membership Reconciler

Runs one reconciliation cycle against a replica set primary:

```
fetch config ──▶ remove members ──▶ add members ──▶ replSetReconfig
```

- The configuration is fetched fresh on every cycle.
- Unforced cycles change at most `UNFORCED_CHANGE_LIMIT` (1) members and never mix
  removals with additions: if anything was removed, additions wait for the next
  cycle. Forced cycles allow up to `FORCED_CHANGE_LIMIT` (50) removals plus as many
  additions.
- A rejected submission (stale version, no quorum) propagates immediately. The
  caller's next scheduled cycle re-fetches and tries again.
"""

from typing import Any, Dict, Optional, Sequence

from motor.motor_asyncio import AsyncIOMotorClient

from mongo_membership.config import Settings, settings
from mongo_membership.database.config_store import ConfigStore, config_store
from mongo_membership.managers.logging_manager import get_logger
from mongo_membership.models.replica_set_models import MembershipChangeRequest
from mongo_membership.services.membership_editor import add_members, remove_members

logger = get_logger(prefix="[RECONCILER]")


class MembershipReconciler:
    """Applies membership change requests to a replica set."""

    def __init__(self, store: ConfigStore = config_store, config: Settings = settings):
        self._store = store
        self._config = config

    def change_limit(self, force: bool) -> int:
        return self._config.FORCED_CHANGE_LIMIT if force else self._config.UNFORCED_CHANGE_LIMIT

    async def reconcile(
        self,
        session: AsyncIOMotorClient,
        addresses_to_add: Optional[Sequence[str]] = None,
        addresses_to_remove: Optional[Sequence[str]] = None,
        force: bool = False,
    ) -> Dict[str, Any]:
        """
        Apply one bounded membership change and submit it.

        Args:
            session: Open client to the primary. Not closed here.
            addresses_to_add: `"host:port"` addresses that should be members.
            addresses_to_remove: `"host:port"` addresses that should no longer be members.
            force: Submit with `force: true` and the larger change limit.

        Returns:
            Dict[str, Any]: Response of the accepted `replSetReconfig`.

        Raises:
            pydantic.ValidationError: If an address is not in `host:port` form.
            AdminCommandError: If the current configuration cannot be read.
            ReconfigureError: If the server rejects the new configuration.
        """
        request = MembershipChangeRequest(
            add=list(addresses_to_add or []),
            remove=list(addresses_to_remove or []),
            force=force,
        )
        return await self.apply(session, request)

    async def apply(self, session: AsyncIOMotorClient, request: MembershipChangeRequest) -> Dict[str, Any]:
        """Run one reconciliation cycle for a validated change request."""
        config = await self._store.get_config(session)
        limit = self.change_limit(request.force)
        # ids of members removed below must not be handed to members added in the same submission
        id_floor = config.max_member_id()

        removed = remove_members(config, request.remove, limit)
        added = 0
        if request.force or not removed:
            added = add_members(config, request.add, limit, min_id=id_floor)
        elif request.add:
            logger.info("Removed %d member(s); deferring additions %s to the next cycle", removed, request.add)

        logger.info(
            "Reconciling from version %d: removed %d, added %d (force: %s)",
            config.version,
            removed,
            added,
            request.force,
        )
        return await self._store.reconfigure(session, config, request.force)


# Global reconciler
membership_reconciler = MembershipReconciler()
