"""
# Replica Set Configuration Models

This module defines the **membership configuration document** of a MongoDB replica
set as returned by `replSetGetConfig` and accepted by `replSetReconfig`.

## Domain Model Overview

- **ReplicaSetConfig**: The versioned configuration document. The authoritative copy
  lives in the cluster; a fetched instance is mutated in memory, submitted once and
  discarded.
- **Member**: One replica set member, identified by a never-reused integer `_id`.
- **MembershipChangeRequest**: A discovery snapshot of addresses to add and remove.

## Field Preservation

The server document carries many fields this package does not interpret
(`protocolVersion`, `settings`, member `priority`/`votes`/`arbiterOnly`, ...). Both
models allow extra fields, so a fetch/submit round trip never drops them.

## Usage Example

```python
config = ReplicaSetConfig.from_document(response["config"])
config.members.append(Member(id=3, host="10.0.0.7:27017"))
await admin.command({"replSetReconfig": config.to_document(), "force": False})
```
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Member(BaseModel):
    """A replica set member.

    Attributes:
        id: Member `_id`, unique within the configuration and never reused.
        host: `"host:port"` address the other members use to reach this one.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: int = Field(..., alias="_id", ge=0)
    host: str


class ReplicaSetConfig(BaseModel):
    """Replica set configuration document.

    Attributes:
        name: Replica set name (`_id`).
        version: Monotonically increasing configuration version.
        is_config_server: Whether the set stores sharded-cluster metadata (`configsvr`).
        members: Ordered member list.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    name: Optional[str] = Field(default=None, alias="_id")
    version: int = Field(..., ge=0)
    is_config_server: bool = Field(default=False, alias="configsvr")
    members: List[Member] = Field(default_factory=list)

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "ReplicaSetConfig":
        """Build a config from the `config` field of a `replSetGetConfig` response."""
        return cls.model_validate(document)

    def to_document(self) -> Dict[str, Any]:
        """Serialize back to the server's field names, extra fields included."""
        document = self.model_dump(by_alias=True)
        if self.name is None:
            document.pop("_id")
        return document

    @property
    def hosts(self) -> List[str]:
        return [member.host for member in self.members]

    def max_member_id(self) -> int:
        """Highest member `_id` in the configuration, `0` when there are no members."""
        return max((member.id for member in self.members), default=0)


class MembershipChangeRequest(BaseModel):
    """
    Addresses to add to and remove from a replica set.

    Produced by an external discovery process. It is a snapshot and may already be
    stale when applied; the editor re-checks every address against the freshly
    fetched configuration.

    Attributes:
        add: Addresses to add, in priority order.
        remove: Addresses to remove, in priority order.
        force: Submit with `force: true` and the larger per-cycle change limit.
    """

    add: List[str] = Field(default_factory=list)
    remove: List[str] = Field(default_factory=list)
    force: bool = False

    @field_validator("add", "remove", mode="before")
    @classmethod
    def none_as_empty(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator("add", "remove")
    @classmethod
    def validate_addresses(cls, v: List[str]) -> List[str]:
        """
        Validates that every entry is a `host:port` address.

        Raises:
            ValueError: If an entry has no host, or its port is not an integer in 1-65535.
        """
        for address in v:
            host, sep, port = address.rpartition(":")
            if not sep or not host:
                raise ValueError(f"Address {address!r} must be in host:port form")
            if not port.isdigit() or not 1 <= int(port) <= 65535:
                raise ValueError(f"Address {address!r} has an invalid port")
        return v
