"""
# Models Package

Pydantic models for the replica set configuration document and membership change requests.
"""

from mongo_membership.models.replica_set_models import Member, MembershipChangeRequest, ReplicaSetConfig

__all__ = ["Member", "MembershipChangeRequest", "ReplicaSetConfig"]
