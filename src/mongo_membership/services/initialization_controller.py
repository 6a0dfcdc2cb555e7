"""
# Initialization Controller

Bootstraps a brand-new single-member replica set.

## Bootstrap Sequence

1. `replSetInitiate` with server defaults. The sole member reports the node's own
   hostname, which is usually a container-local name other nodes cannot resolve.
2. Fetch the resulting configuration.
3. Rewrite `members[0].host` to the externally reachable address and set
   `configsvr` from the role flag.
4. Submit the corrected configuration with `force: false`.

A freshly initiated set cannot accept a reconfiguration until its own election
settles, so step 4 is retried on a fixed interval (`INIT_RECONFIG_ATTEMPTS` x
`INIT_RECONFIG_INTERVAL`, 20 x 0.5s by default, no backoff). The window is short and
bounded; running out of attempts means the bootstrap is broken and is reported as
`InitializationTimeoutError`.

## Usage Example

```python
async with connection_gateway.session() as client:
    await initialization_controller.init(client, "10.0.0.5:27017", is_config_server=False)
```
"""

import asyncio
from typing import Any, Dict, Optional

from motor.motor_asyncio import AsyncIOMotorClient

from mongo_membership.config import Settings, settings
from mongo_membership.database.config_store import ConfigStore, config_store
from mongo_membership.errors import InitializationTimeoutError, ReconfigureError
from mongo_membership.managers.logging_manager import get_logger

logger = get_logger(prefix="[INIT]")


class InitializationController:
    """
    Initiates a replica set and corrects its self-reported member address.

    Attributes:
        attempts (int): Reconfigure attempts before giving up.
        interval (float): Seconds to wait between attempts.
    """

    def __init__(
        self,
        store: ConfigStore = config_store,
        config: Settings = settings,
        attempts: Optional[int] = None,
        interval: Optional[float] = None,
    ):
        self._store = store
        self._config = config
        self.attempts = attempts if attempts is not None else config.INIT_RECONFIG_ATTEMPTS
        self.interval = interval if interval is not None else config.INIT_RECONFIG_INTERVAL

    async def init(
        self,
        session: AsyncIOMotorClient,
        address: str,
        is_config_server: Optional[bool] = None,
    ) -> Dict[str, Any]:
        """
        Initiate the replica set on `session` and advertise it as `address`.

        Args:
            session: Open client to the node being initiated. Not closed here.
            address: Externally reachable `"host:port"` of this node.
            is_config_server: Config-server role; defaults to `settings.IS_CONFIG_RS`.

        Returns:
            Dict[str, Any]: Response of the accepted `replSetReconfig`.

        Raises:
            AdminCommandError: If initiation or the follow-up config read is rejected.
            InitializationTimeoutError: If no reconfigure attempt was accepted.
        """
        if is_config_server is None:
            is_config_server = self._config.IS_CONFIG_RS

        logger.info("Initiating replica set as %s (config server: %s)", address, is_config_server)
        await self._store.initiate(session)

        corrected = await self._store.get_config(session)
        logger.info("Initial config has members %s", corrected.hosts)
        corrected.is_config_server = is_config_server
        corrected.members[0].host = address

        last_error: Optional[ReconfigureError] = None
        for attempt in range(1, self.attempts + 1):
            # reconfigure bumps the version in place; each attempt submits fetched version + 1
            candidate = corrected.model_copy(deep=True)
            try:
                response = await self._store.reconfigure(session, candidate, force=False)
            except ReconfigureError as e:
                last_error = e
                logger.warning("Reconfigure attempt %d/%d failed: %s", attempt, self.attempts, e)
                if attempt < self.attempts:
                    await asyncio.sleep(self.interval)
                continue

            logger.info("Replica set initialized as %s after %d attempt(s)", address, attempt)
            return response

        logger.error("Replica set initialization gave up after %d attempts", self.attempts)
        raise InitializationTimeoutError(self.attempts, last_error) from last_error


# Global initialization controller
initialization_controller = InitializationController()
