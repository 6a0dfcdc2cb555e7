"""
# mongo_membership

Membership management for MongoDB replica sets: bootstrap a brand-new set and
converge its member list toward a desired set of healthy endpoints under the
server's optimistic version check.

## Module Boundary

These coroutines are what an external scheduler or CLI calls:

| Function | Purpose |
|----------|---------|
| `connect(address)` | Open a direct session to one node (caller closes it) |
| `get_status(session)` | Raw `replSetGetStatus` document |
| `init(session, address, is_config_server)` | Bootstrap a single-member set |
| `reconcile(session, addresses_to_add, addresses_to_remove, force)` | One membership change cycle |
| `is_member(address)` | Whether `address` already belongs to an initialized set |

## Usage Example

```python
import mongo_membership

if not await mongo_membership.is_member(my_address):
    client = await mongo_membership.connect()
    try:
        await mongo_membership.init(client, my_address)
    finally:
        client.close()
```
"""

from typing import Any, Dict, Optional, Sequence

from motor.motor_asyncio import AsyncIOMotorClient

from mongo_membership.database.config_store import config_store
from mongo_membership.database.connection import connection_gateway
from mongo_membership.errors import (
    AdminCommandError,
    ClusterConnectionError,
    InitializationTimeoutError,
    ReconfigureError,
    ReplicaSetError,
    TLSLoadError,
)
from mongo_membership.services.initialization_controller import initialization_controller
from mongo_membership.services.membership_probe import membership_probe
from mongo_membership.services.membership_reconciler import membership_reconciler

__version__ = "0.1.0"


async def connect(address: Optional[str] = None) -> AsyncIOMotorClient:
    return await connection_gateway.connect(address)


async def get_status(session: AsyncIOMotorClient) -> Dict[str, Any]:
    return await config_store.get_status(session)


async def init(
    session: AsyncIOMotorClient, address: str, is_config_server: Optional[bool] = None
) -> Dict[str, Any]:
    return await initialization_controller.init(session, address, is_config_server)


async def reconcile(
    session: AsyncIOMotorClient,
    addresses_to_add: Optional[Sequence[str]] = None,
    addresses_to_remove: Optional[Sequence[str]] = None,
    force: bool = False,
) -> Dict[str, Any]:
    return await membership_reconciler.reconcile(session, addresses_to_add, addresses_to_remove, force)


async def is_member(address: Optional[str]) -> bool:
    return await membership_probe.is_member(address)


__all__ = [
    "AdminCommandError",
    "ClusterConnectionError",
    "InitializationTimeoutError",
    "ReconfigureError",
    "ReplicaSetError",
    "TLSLoadError",
    "connect",
    "get_status",
    "init",
    "is_member",
    "reconcile",
]
