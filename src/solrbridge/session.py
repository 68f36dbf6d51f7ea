"""Connection lifecycle for a Solr server."""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

import httpx

from solrbridge.core.exceptions import ConnectFailure, MalformedAddressError, NotConnectedError
from solrbridge.core.models import ConnectionConfig
from solrbridge.core.types import ConnectionState, LivenessMode
from solrbridge.search.client import ScopedBasicAuth, SolrClient, parse_server_url

if TYPE_CHECKING:
    from solrbridge.config import SolrSettings

logger = logging.getLogger(__name__)


class SolrSession:
    """
    Owns the client binding to a Solr server.

    The session is either DISCONNECTED (no binding) or CONNECTED. Connect and
    disconnect are serialized; other components only read ``client``.

    Usage:
        session = SolrSession(ConnectionConfig(server_address="http://localhost:8983/solr/books"))
        session.connect()
        if session.validate():
            ...
        session.disconnect()
    """

    def __init__(
        self,
        config: ConnectionConfig | None = None,
        *,
        timeout: float = 30.0,
        liveness_mode: LivenessMode = LivenessMode.ANY_RESPONSE,
        strict_credentials: bool = False,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """
        Initialize a disconnected session.

        Args:
            config: Default connection config used by connect()
            timeout: HTTP timeout in seconds for the client binding
            liveness_mode: How validate() judges a ping response
            strict_credentials: Reject partial credentials instead of ignoring them
            transport: Optional custom httpx transport for the client binding
        """
        self._config = config or ConnectionConfig()
        self._timeout = timeout
        self._liveness_mode = liveness_mode
        self._strict_credentials = strict_credentials
        self._transport = transport
        self._client: SolrClient | None = None
        self._lock = threading.Lock()

    @classmethod
    def from_settings(
        cls,
        settings: SolrSettings,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> SolrSession:
        """Create a session configured from settings."""
        return cls(
            settings.connection_config(),
            timeout=settings.timeout,
            liveness_mode=settings.liveness_mode,
            strict_credentials=settings.strict_credentials,
            transport=transport,
        )

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def config(self) -> ConnectionConfig:
        return self._config

    @property
    def state(self) -> ConnectionState:
        if self._client is None:
            return ConnectionState.DISCONNECTED
        return ConnectionState.CONNECTED

    @property
    def is_connected(self) -> bool:
        """Whether a client binding is held (no network check)."""
        return self._client is not None

    @property
    def identifier(self) -> str | None:
        """URL of the bound server, or None when disconnected."""
        client = self._client
        return client.url if client is not None else None

    @property
    def client(self) -> SolrClient:
        """
        The live client binding.

        Raises:
            NotConnectedError: If the session is disconnected
        """
        client = self._client
        if client is None:
            raise NotConnectedError("Not connected to a Solr server. Call connect() first.")
        return client

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def connect(self, config: ConnectionConfig | None = None) -> None:
        """
        Bind the session to a Solr server.

        Any previous binding is closed. If connecting fails the session is
        left disconnected.

        Args:
            config: Connection config; defaults to the one given at construction

        Raises:
            MalformedAddressError: If the server address cannot be parsed
            ConnectFailure: For any other setup failure
        """
        with self._lock:
            if config is not None:
                self._config = config
            config = self._config

            self._release()

            try:
                url = parse_server_url(config.server_address)
            except MalformedAddressError:
                logger.error(f"The url: {config.server_address} is malformed.")
                raise

            auth = None
            if config.has_credentials:
                # Credentials are only sent to the configured host and port
                auth = ScopedBasicAuth(config.username, config.password, url.host, url.port)
            elif config.has_partial_credentials:
                if self._strict_credentials:
                    raise ConnectFailure(
                        "Both username and password are required for basic auth",
                        details={"server_address": config.server_address},
                    )
                logger.warning(
                    "Only one of username/password is set; connecting without credentials"
                )

            try:
                client = SolrClient(
                    str(url),
                    auth=auth,
                    timeout=self._timeout,
                    transport=self._transport,
                )
            except Exception as e:
                raise ConnectFailure(
                    f"Could not connect to solr: {e}",
                    details={"server_address": config.server_address},
                ) from e

            self._client = client
            logger.info(f"Connected to Solr at {client.url}")

    def disconnect(self) -> None:
        """Drop the client binding. Safe to call when already disconnected."""
        with self._lock:
            if self._client is None:
                return
            url = self._client.url
            self._release()
            logger.info(f"Disconnected from Solr at {url}")

    def _release(self) -> None:
        """Close and clear the binding. Caller must hold the lock."""
        client, self._client = self._client, None
        if client is None:
            return
        try:
            client.close()
        except Exception as e:
            logger.warning(f"Error while closing Solr client: {e}")

    def validate(self) -> bool:
        """
        Check that the server answers a ping.

        Never raises. Returns False without any request when disconnected.
        """
        client = self._client
        if client is None:
            return False

        try:
            response = client.ping()
        except Exception as e:
            logger.warning(f"Got exception while trying to ping server: {e}")
            return False

        q_time = (response.get("responseHeader") or {}).get("QTime", 0)
        logger.debug(f"Pinged the server, response time is: {q_time}")

        if self._liveness_mode == LivenessMode.POSITIVE_QTIME:
            return isinstance(q_time, int) and q_time > 0
        return True

    def __enter__(self) -> SolrSession:
        if not self.is_connected:
            self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.disconnect()
