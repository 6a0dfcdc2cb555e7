"""
# Replica Set Config Store

Reads and writes the replica set configuration document through admin commands.

| Method | Admin command |
|--------|---------------|
| `get_config` | `replSetGetConfig` |
| `get_status` | `replSetGetStatus` |
| `initiate` | `replSetInitiate` |
| `reconfigure` | `replSetReconfig` |

Nothing is cached: every read goes to the server, so callers always mutate the
freshest configuration available. There is no retry at this layer; callers choose
their own retry policy. Driver errors are translated into `AdminCommandError` /
`ReconfigureError`.
"""

from typing import Any, Dict

from motor.motor_asyncio import AsyncIOMotorClient
from pydantic import ValidationError
from pymongo.errors import OperationFailure, PyMongoError

from mongo_membership.errors import AdminCommandError, ReconfigureError
from mongo_membership.managers.logging_manager import get_logger
from mongo_membership.models.replica_set_models import ReplicaSetConfig

logger = get_logger(prefix="[CONFIG_STORE]")


def _command_error(error_cls: type, command: str, exc: PyMongoError) -> AdminCommandError:
    if isinstance(exc, OperationFailure):
        details = exc.details or {}
        return error_cls(command, str(exc), code=exc.code, code_name=details.get("codeName"))
    return error_cls(command, str(exc))


class ConfigStore:
    """Admin-command access to a replica set's membership configuration."""

    async def _run(self, session: AsyncIOMotorClient, command: str, document: Dict[str, Any]) -> Dict[str, Any]:
        logger.debug("Issuing %s", command)
        try:
            return await session.admin.command(document)
        except PyMongoError as e:
            logger.warning("%s rejected: %s", command, e)
            raise _command_error(AdminCommandError, command, e) from e

    async def get_config(self, session: AsyncIOMotorClient) -> ReplicaSetConfig:
        """
        Fetch the current replica set configuration.

        Raises:
            AdminCommandError: If the node is not initialized, not reachable, refuses the
                command, or answers with a malformed configuration.
        """
        response = await self._run(session, "replSetGetConfig", {"replSetGetConfig": 1})
        try:
            config = ReplicaSetConfig.from_document(response["config"])
        except (KeyError, TypeError, ValidationError) as e:
            logger.warning("replSetGetConfig returned an unusable config: %s", e)
            raise AdminCommandError("replSetGetConfig", f"malformed config in response: {e!r}") from e
        logger.debug("Fetched config version %d with %d members", config.version, len(config.members))
        return config

    async def get_status(self, session: AsyncIOMotorClient) -> Dict[str, Any]:
        """Return the raw `replSetGetStatus` document."""
        return await self._run(session, "replSetGetStatus", {"replSetGetStatus": 1})

    async def initiate(self, session: AsyncIOMotorClient) -> Dict[str, Any]:
        """Initiate a single-member replica set with server-chosen defaults."""
        logger.info("Issuing replSetInitiate")
        return await self._run(session, "replSetInitiate", {"replSetInitiate": {}})

    async def reconfigure(
        self, session: AsyncIOMotorClient, config: ReplicaSetConfig, force: bool = False
    ) -> Dict[str, Any]:
        """
        Increment `config.version` and submit the configuration.

        Args:
            session: Open client to the primary (or any member when `force` is set).
            config: Configuration to submit. Its version is incremented in place.
            force: Submit with `force: true`.

        Returns:
            Dict[str, Any]: The server's command response.

        Raises:
            ReconfigureError: If the server rejects the configuration, e.g. a stale
                version, an unsatisfied quorum or too large a change.
        """
        config.version += 1
        logger.info(
            "Submitting replSetReconfig version %d (members: %s, force: %s)",
            config.version,
            config.hosts,
            force,
        )
        try:
            return await session.admin.command({"replSetReconfig": config.to_document(), "force": force})
        except PyMongoError as e:
            logger.warning("replSetReconfig version %d rejected: %s", config.version, e)
            raise _command_error(ReconfigureError, "replSetReconfig", e) from e


# Global config store
config_store = ConfigStore()
