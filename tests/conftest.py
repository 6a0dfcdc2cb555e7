import copy
from typing import Any, Dict, List, Optional
from unittest.mock import MagicMock

import pytest
from pymongo.errors import OperationFailure


class FakeReplicaSetNode:
    """In-memory stand-in for the admin database of a single mongod.

    Enforces the server's version check on replSetReconfig so stale submissions
    from concurrent reconcilers are rejected the way a real primary rejects them.
    """

    def __init__(self, self_host: str = "mongo-0.local:27017", config: Optional[Dict[str, Any]] = None):
        self.self_host = self_host
        self.config = copy.deepcopy(config)
        self.reconfig_failures = 0
        self.submissions: List[Dict[str, Any]] = []
        self.commands: List[str] = []

    @property
    def initialized(self) -> bool:
        return self.config is not None

    async def command(self, document: Any) -> Dict[str, Any]:
        name = document if isinstance(document, str) else next(iter(document))
        self.commands.append(name)

        if name == "ping":
            return {"ok": 1}
        if name == "replSetInitiate":
            if self.initialized:
                raise OperationFailure("already initialized", code=23, details={"codeName": "AlreadyInitialized"})
            self.config = {
                "_id": "rs0",
                "version": 1,
                "protocolVersion": 1,
                "members": [{"_id": 0, "host": self.self_host, "priority": 1, "votes": 1}],
                "settings": {"chainingAllowed": True},
            }
            return {"ok": 1}

        if not self.initialized:
            raise OperationFailure(
                "no replset config has been received", code=94, details={"codeName": "NotYetInitialized"}
            )

        if name == "replSetGetConfig":
            return {"config": copy.deepcopy(self.config), "ok": 1}
        if name == "replSetGetStatus":
            return {"set": self.config["_id"], "members": copy.deepcopy(self.config["members"]), "ok": 1}
        if name == "replSetReconfig":
            return self._reconfig(document)
        raise OperationFailure(f"no such command: '{name}'", code=59, details={"codeName": "CommandNotFound"})

    def _reconfig(self, document: Dict[str, Any]) -> Dict[str, Any]:
        new_config = copy.deepcopy(document["replSetReconfig"])
        self.submissions.append({"config": new_config, "force": document.get("force", False)})

        if self.reconfig_failures > 0:
            self.reconfig_failures -= 1
            raise OperationFailure("node is not in primary state", code=10107, details={"codeName": "NotWritablePrimary"})
        if new_config["version"] <= self.config["version"]:
            raise OperationFailure(
                f"version {new_config['version']} is not greater than {self.config['version']}",
                code=103,
                details={"codeName": "NewReplicaSetConfigurationIncompatible"},
            )

        self.config = new_config
        return {"ok": 1}


def make_session(node: FakeReplicaSetNode) -> MagicMock:
    session = MagicMock()
    session.admin.command.side_effect = node.command
    return session


@pytest.fixture
def initialized_node():
    return FakeReplicaSetNode(
        config={
            "_id": "rs0",
            "version": 1,
            "protocolVersion": 1,
            "members": [{"_id": 0, "host": "A:27017", "priority": 2}],
            "settings": {"chainingAllowed": True},
        }
    )


@pytest.fixture
def fresh_node():
    return FakeReplicaSetNode()


@pytest.fixture
def session_for():
    return make_session
