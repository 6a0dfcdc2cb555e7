"""
# Membership Editor

Pure, I/O-free edits of an in-memory `ReplicaSetConfig`.

## Invariants

- **Unique ids**: new members get `1 + max(existing _id)`, allocated upward within a
  call, so ids never collide with current members. Callers that remove and add in
  the same edit pass the pre-removal maximum as `min_id`, so a removed id is never
  handed to a new host in the same submission.
- **Unique hosts**: an address already present is skipped, never added twice. The
  discovery snapshot that produced the address list may be stale by the time it
  is applied, so every address is re-checked against the live member list.
- **Bounded change**: at most `limit` members are added or removed per call.

Neither function touches `config.version`; that is `ConfigStore.reconfigure`'s job.
"""

from typing import Optional, Sequence

from mongo_membership.managers.logging_manager import get_logger
from mongo_membership.models.replica_set_models import Member, ReplicaSetConfig

logger = get_logger(prefix="[MEMBERSHIP_EDITOR]")


def add_members(
    config: ReplicaSetConfig,
    addresses_to_add: Optional[Sequence[str]],
    limit: int,
    min_id: int = 0,
) -> int:
    """
    Append new members for addresses not already in the configuration.

    Args:
        config: Configuration to edit in place.
        addresses_to_add: Addresses in priority order.
        limit: Maximum number of members to add in this call.
        min_id: Highest `_id` already allocated, including members removed earlier
            in the same edit. New ids are strictly greater than it.

    Returns:
        int: Number of members added.
    """
    if not addresses_to_add:
        return 0

    next_id = max(config.max_member_id(), min_id)
    added = 0

    for address in addresses_to_add:
        if added >= limit:
            break

        if any(member.host == address for member in config.members):
            logger.info("Host [%s] already exists in the replica set. Not adding...", address)
            continue

        next_id += 1
        config.members.append(Member(id=next_id, host=address))
        added += 1

    return added


def remove_members(config: ReplicaSetConfig, addresses_to_remove: Optional[Sequence[str]], limit: int) -> int:
    """
    Remove the first member matching each address.

    Args:
        config: Configuration to edit in place.
        addresses_to_remove: Addresses in priority order.
        limit: Maximum number of members to remove in this call.

    Returns:
        int: Number of members removed.
    """
    if not addresses_to_remove:
        return 0

    removed = 0

    for address in addresses_to_remove:
        if removed >= limit:
            break

        # positions are recomputed after every removal
        index = next((i for i, member in enumerate(config.members) if member.host == address), None)
        if index is None:
            continue

        del config.members[index]
        removed += 1

    return removed
