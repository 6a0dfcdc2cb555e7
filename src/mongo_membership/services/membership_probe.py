"""
# Membership Probe

Answers whether an address already belongs to an initialized replica set, which
decides between bootstrapping a new set and joining an existing one.

Any failure (not initialized, unreachable, unauthorized) yields `False`. The
boolean cannot tell those cases apart; the underlying error is logged with its
type and server code name for operators who need to.
"""

from typing import Optional

from pymongo.errors import PyMongoError

from mongo_membership.database.config_store import ConfigStore, config_store
from mongo_membership.database.connection import ConnectionGateway, connection_gateway
from mongo_membership.errors import AdminCommandError, ReplicaSetError
from mongo_membership.managers.logging_manager import get_logger

logger = get_logger(prefix="[PROBE]")


class MembershipProbe:
    """Checks replica set membership of individual endpoints."""

    def __init__(self, gateway: ConnectionGateway = connection_gateway, store: ConfigStore = config_store):
        self._gateway = gateway
        self._store = store

    async def is_member(self, address: Optional[str]) -> bool:
        """
        Return `True` if `address` answers a replica set config read.

        Opens its own session and always closes it.
        """
        try:
            async with self._gateway.session(address) as client:
                await self._store.get_config(client)
        except (ReplicaSetError, PyMongoError) as e:
            code_name = e.code_name if isinstance(e, AdminCommandError) else None
            logger.info(
                "%s is not a replica set member (%s%s): %s",
                address,
                type(e).__name__,
                f", {code_name}" if code_name else "",
                e,
            )
            return False
        return True


# Global probe
membership_probe = MembershipProbe()
