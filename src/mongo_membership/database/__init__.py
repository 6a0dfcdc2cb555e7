"""
# Database Package

Access to MongoDB endpoints through the **Motor** async driver.

- **`connection`**: `ConnectionGateway` opens direct sessions to one node and owns the
  process-wide TLS material cache.
- **`config_store`**: `ConfigStore` issues the replica set admin commands.

Module-level singletons `connection_gateway` and `config_store` are shared by the
services; tests construct their own instances.
"""

from mongo_membership.database.config_store import ConfigStore, config_store
from mongo_membership.database.connection import (
    ConnectionGateway,
    TLSMaterial,
    TLSMaterialCache,
    build_connection_uri,
    connection_gateway,
)

__all__ = [
    "ConfigStore",
    "ConnectionGateway",
    "TLSMaterial",
    "TLSMaterialCache",
    "build_connection_uri",
    "config_store",
    "connection_gateway",
]
