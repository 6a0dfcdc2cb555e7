"""
# Connection Gateway

This module opens **direct, authenticated, optionally TLS-secured** sessions to a
single `mongod` endpoint using the **Motor** async driver.

## Connection Addressing

```
mongodb://[user:pass@]host:port/database
```

- Credentials come from `settings.MONGODB_USERNAME` / `MONGODB_PASSWORD` and are
  percent-encoded with `quote_plus`.
- The port is `settings.MONGODB_PORT` unless the address carries its own `:port`.
- With no address the loopback host `settings.MONGODB_DEFAULT_HOST` is used, since a
  sidecar shares the network namespace of its `mongod`.
- Every client is created with `directConnection=True`: the node may not be part of
  an initialized replica set yet, and admin commands must reach that node only.

## TLS Material

Up to four blobs (certificate, private key, CA bundle, revocation list) are read
from the configured paths **once per process** by `TLSMaterialCache`. The cached
`TLSMaterial` is immutable and there is no reload path: changes to the files after
the first load are never observed. Because the driver consumes file paths, the
cached bytes are written once to process-scoped temporary files (certificate and
key combined into a single PEM) which every later client reuses.

## Usage Example

```python
from mongo_membership.database.connection import connection_gateway

async with connection_gateway.session("10.0.0.5:27017") as client:
    status = await client.admin.command({"replSetGetStatus": 1})
```
"""

import asyncio
import atexit
import os
import tempfile
from contextlib import asynccontextmanager, suppress
from dataclasses import dataclass
from typing import Any, AsyncIterator, Dict, Optional, Tuple
from urllib.parse import quote_plus

from motor.motor_asyncio import AsyncIOMotorClient
from pymongo.errors import ConfigurationError, ConnectionFailure, OperationFailure

from mongo_membership.config import Settings, settings
from mongo_membership.errors import ClusterConnectionError, TLSLoadError
from mongo_membership.managers.logging_manager import get_logger

logger = get_logger(prefix="[CONNECTION]")


def split_address(address: str, default_port: int) -> Tuple[str, int]:
    """Split `"host[:port]"` into host and port, falling back to `default_port`."""
    host, sep, port = address.rpartition(":")
    if sep and host and port.isdigit() and ":" not in host:
        return host, int(port)
    return address, default_port


def build_connection_uri(host: Optional[str] = None, config: Settings = settings, redact: bool = False) -> str:
    """
    Build the connection URI for a single endpoint.

    Args:
        host: `"host"` or `"host:port"`. Defaults to `config.MONGODB_DEFAULT_HOST`.
        config: Settings to read credentials and defaults from.
        redact: Replace the password with `***`, for logging.

    Returns:
        str: `mongodb://[user:pass@]host:port/database`
    """
    hostname, port = split_address(host or config.MONGODB_DEFAULT_HOST, config.MONGODB_PORT)

    credentials = ""
    if config.MONGODB_USERNAME:
        username = quote_plus(config.MONGODB_USERNAME)
        if redact:
            password = "***"
        else:
            password = quote_plus(config.MONGODB_PASSWORD.get_secret_value()) if config.MONGODB_PASSWORD else ""
        credentials = f"{username}:{password}@"

    return f"mongodb://{credentials}{hostname}:{port}/{config.MONGODB_DATABASE}"


@dataclass(frozen=True)
class TLSMaterial:
    """Certificate material read from disk. Any blob may be absent."""

    cert: Optional[bytes] = None
    key: Optional[bytes] = None
    ca: Optional[bytes] = None
    crl: Optional[bytes] = None

    @property
    def is_empty(self) -> bool:
        return not any([self.cert, self.key, self.ca, self.crl])


@dataclass(frozen=True)
class TLSFiles:
    """Process-scoped files holding cached TLS material, in the form the driver takes."""

    certificate_key_file: Optional[str] = None
    ca_file: Optional[str] = None
    crl_file: Optional[str] = None


def _read_file(path: str) -> bytes:
    with open(path, "rb") as fh:
        return fh.read()


def _remove_temp_file(path: str) -> None:
    with suppress(FileNotFoundError):
        os.remove(path)


def _write_temp_file(data: bytes, suffix: str) -> str:
    fd, path = tempfile.mkstemp(prefix="mongo-membership-", suffix=suffix)
    # holds private key material; removed when the process exits
    atexit.register(_remove_temp_file, path)
    with os.fdopen(fd, "wb") as fh:
        fh.write(data)
    return path


class TLSMaterialCache:
    """
    Loads TLS material at most once per process.

    The first call to `get()` reads every configured path concurrently; all later
    calls, from any coroutine, receive the same immutable `TLSMaterial`. A failed
    load caches nothing, so the next call tries again.

    Attributes:
        loaded (bool): Whether material has been loaded.
    """

    def __init__(self, config: Settings = settings):
        self._config = config
        self._material: Optional[TLSMaterial] = None
        self._files: Optional[TLSFiles] = None
        self._lock = asyncio.Lock()

    @property
    def loaded(self) -> bool:
        return self._material is not None

    async def _load_one(self, path: Optional[str]) -> Optional[bytes]:
        if not path:
            return None
        try:
            return await asyncio.to_thread(_read_file, path)
        except OSError as e:
            raise TLSLoadError(path, str(e)) from e

    async def get(self) -> TLSMaterial:
        """
        Return the process-wide TLS material, loading it on first use.

        Raises:
            TLSLoadError: If any configured file cannot be read.
        """
        if self._material is not None:
            return self._material

        async with self._lock:
            if self._material is None:
                cert, key, ca, crl = await asyncio.gather(
                    self._load_one(self._config.MONGODB_TLS_CERT),
                    self._load_one(self._config.MONGODB_TLS_KEY),
                    self._load_one(self._config.MONGODB_TLS_CA),
                    self._load_one(self._config.MONGODB_TLS_CRL),
                )
                self._material = TLSMaterial(cert=cert, key=key, ca=ca, crl=crl)
                logger.info(
                    "Loaded TLS material (cert: %s, key: %s, ca: %s, crl: %s)",
                    cert is not None,
                    key is not None,
                    ca is not None,
                    crl is not None,
                )
        return self._material

    async def get_files(self) -> TLSFiles:
        """
        Return driver-ready files written once from the cached material.

        Raises:
            TLSLoadError: If the material cannot be loaded or the files cannot be written.
        """
        if self._files is not None:
            return self._files

        material = await self.get()
        async with self._lock:
            if self._files is None:
                self._files = await asyncio.to_thread(self._materialize, material)
        return self._files

    def _materialize(self, material: TLSMaterial) -> TLSFiles:
        try:
            certificate_key_file = None
            if material.cert or material.key:
                pem = (material.cert or b"").rstrip(b"\n") + b"\n" + (material.key or b"")
                certificate_key_file = _write_temp_file(pem, ".pem")
            return TLSFiles(
                certificate_key_file=certificate_key_file,
                ca_file=_write_temp_file(material.ca, ".ca.pem") if material.ca else None,
                crl_file=_write_temp_file(material.crl, ".crl.pem") if material.crl else None,
            )
        except OSError as e:
            raise TLSLoadError(tempfile.gettempdir(), str(e)) from e


class ConnectionGateway:
    """
    Opens Motor clients to individual replica set members.

    Sessions returned by `connect()` are owned by the caller, who must close them.
    `session()` is the self-closing variant.
    """

    def __init__(self, config: Settings = settings, tls_cache: Optional[TLSMaterialCache] = None):
        self._config = config
        self._tls_cache = tls_cache or TLSMaterialCache(config)

    async def client_options(self) -> Dict[str, Any]:
        """Driver keyword options for the current settings, TLS files included."""
        config = self._config
        options: Dict[str, Any] = {
            "authSource": config.MONGODB_AUTH_SOURCE,
            "directConnection": True,
            "serverSelectionTimeoutMS": config.MONGODB_SERVER_SELECTION_TIMEOUT,
            "connectTimeoutMS": config.MONGODB_CONNECTION_TIMEOUT,
        }
        if config.MONGODB_USERNAME:
            options["authMechanism"] = config.MONGODB_AUTH_MECHANISM

        if config.MONGODB_TLS:
            options["tls"] = True
            options["tlsAllowInvalidHostnames"] = not config.MONGODB_TLS_SERVER_IDENTITY_CHECK
            files = await self._tls_cache.get_files()
            if files.certificate_key_file:
                options["tlsCertificateKeyFile"] = files.certificate_key_file
                if config.MONGODB_TLS_PASSWORD:
                    options["tlsCertificateKeyFilePassword"] = config.MONGODB_TLS_PASSWORD.get_secret_value()
            if files.ca_file:
                options["tlsCAFile"] = files.ca_file
            if files.crl_file:
                options["tlsCRLFile"] = files.crl_file

        return options

    async def connect(self, address: Optional[str] = None) -> AsyncIOMotorClient:
        """
        Open and verify a session to a single endpoint.

        Args:
            address: `"host"` or `"host:port"`; defaults to the loopback host.

        Returns:
            AsyncIOMotorClient: A connected client. The caller must `close()` it.

        Raises:
            ClusterConnectionError: If the endpoint is unreachable or rejects authentication.
            TLSLoadError: If TLS is enabled and the certificate material cannot be read.
        """
        address = address or self._config.MONGODB_DEFAULT_HOST
        options = await self.client_options()
        logger.debug("Connecting to %s", build_connection_uri(address, self._config, redact=True))

        try:
            client = AsyncIOMotorClient(build_connection_uri(address, self._config), **options)
        except ConfigurationError as e:
            raise ClusterConnectionError(address, str(e)) from e

        try:
            await client.admin.command("ping")
        except (ConnectionFailure, OperationFailure) as e:
            client.close()
            logger.warning("Failed to connect to %s: %s", address, e)
            raise ClusterConnectionError(address, str(e)) from e

        return client

    @asynccontextmanager
    async def session(self, address: Optional[str] = None) -> AsyncIterator[AsyncIOMotorClient]:
        """Open a session with `connect()` and close it on every exit path."""
        client = await self.connect(address)
        try:
            yield client
        finally:
            client.close()


# Global gateway
connection_gateway = ConnectionGateway()
