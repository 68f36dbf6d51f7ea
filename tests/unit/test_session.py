"""Tests for the connection lifecycle."""

from __future__ import annotations

import logging
import threading

import httpx
import pytest
from httpx import Response

from solrbridge.config import SolrSettings
from solrbridge.core.exceptions import ConnectFailure, MalformedAddressError, NotConnectedError
from solrbridge.core.models import ConnectionConfig
from solrbridge.core.types import ConnectionState, LivenessMode
from solrbridge.search.client import SolrClient
from solrbridge.session import SolrSession

# ============================================================================
# Connect / Disconnect Tests
# ============================================================================


class TestConnect:
    """Tests for connect and disconnect."""

    def test_starts_disconnected(self, connection_config: ConnectionConfig):
        session = SolrSession(connection_config)

        assert session.state == ConnectionState.DISCONNECTED
        assert session.is_connected is False
        assert session.identifier is None

    def test_connect(self, connection_config: ConnectionConfig, solr_url: str, solr_mock):
        """Connecting binds a client without any request."""
        session = SolrSession(connection_config)
        session.connect()

        assert session.state == ConnectionState.CONNECTED
        assert session.identifier == solr_url
        assert solr_mock.call_count == 0
        session.disconnect()

    def test_connect_with_config(self, solr_url: str):
        """A config passed to connect() replaces the default one."""
        session = SolrSession()
        session.connect(ConnectionConfig(server_address=solr_url))

        assert session.config.server_address == solr_url
        assert session.identifier == solr_url
        session.disconnect()

    def test_reconnect_replaces_binding(self, connection_config: ConnectionConfig):
        """Connecting again closes the previous client."""
        session = SolrSession(connection_config)
        session.connect()
        first = session.client

        session.connect(ConnectionConfig(server_address="http://other.test:8983/solr"))

        assert first.is_closed is True
        assert session.identifier == "http://other.test:8983/solr"
        session.disconnect()

    @pytest.mark.parametrize("address", ["", "not a url", "ftp://files.example.com/solr"])
    def test_malformed_address(self, address: str, solr_mock):
        """A malformed address leaves the session disconnected."""
        session = SolrSession(ConnectionConfig(server_address=address))

        with pytest.raises(MalformedAddressError):
            session.connect()

        assert session.state == ConnectionState.DISCONNECTED
        assert session.validate() is False
        assert solr_mock.call_count == 0

    def test_failed_connect_releases_previous(self, connection_config: ConnectionConfig):
        """A failed reconnect does not keep the old binding."""
        session = SolrSession(connection_config)
        session.connect()
        first = session.client

        with pytest.raises(MalformedAddressError):
            session.connect(ConnectionConfig(server_address="not a url"))

        assert first.is_closed is True
        assert session.is_connected is False

    def test_disconnect_idempotent(self, connection_config: ConnectionConfig):
        """Disconnecting twice (or never connecting) is harmless."""
        session = SolrSession(connection_config)
        session.disconnect()
        session.connect()
        session.disconnect()
        session.disconnect()

        assert session.state == ConnectionState.DISCONNECTED

    def test_client_requires_connection(self, connection_config: ConnectionConfig):
        with pytest.raises(NotConnectedError):
            SolrSession(connection_config).client

    def test_context_manager(self, connection_config: ConnectionConfig):
        """The session connects on enter and disconnects on exit."""
        with SolrSession(connection_config) as session:
            assert session.is_connected is True

        assert session.is_connected is False


# ============================================================================
# Credentials Tests
# ============================================================================


class TestCredentials:
    """Tests for basic auth setup."""

    def test_credentials_sent(self, solr_url: str, solr_mock):
        config = ConnectionConfig(server_address=solr_url, username="solr", password="SolrRocks")

        with SolrSession(config) as session:
            session.validate()

        request = solr_mock.ping.calls.last.request
        assert request.headers["Authorization"].startswith("Basic ")

    def test_no_credentials(self, solr_url: str, solr_mock):
        with SolrSession(ConnectionConfig(server_address=solr_url)) as session:
            session.validate()

        assert "Authorization" not in solr_mock.ping.calls.last.request.headers

    def test_partial_credentials_ignored(self, solr_url: str, solr_mock, caplog):
        """Partial credentials are dropped with a warning."""
        config = ConnectionConfig(server_address=solr_url, username="solr")

        with caplog.at_level(logging.WARNING, logger="solrbridge"):
            with SolrSession(config) as session:
                session.validate()

        assert "Authorization" not in solr_mock.ping.calls.last.request.headers
        assert "username/password" in caplog.text

    def test_partial_credentials_strict(self, solr_url: str):
        """Strict mode rejects partial credentials."""
        config = ConnectionConfig(server_address=solr_url, password="SolrRocks")
        session = SolrSession(config, strict_credentials=True)

        with pytest.raises(ConnectFailure):
            session.connect()

        assert session.is_connected is False


# ============================================================================
# Validate Tests
# ============================================================================


class TestValidate:
    """Tests for liveness validation."""

    def test_disconnected_makes_no_request(self, connection_config: ConnectionConfig, solr_mock):
        session = SolrSession(connection_config)

        assert session.validate() is False
        assert solr_mock.call_count == 0

    def test_ping_ok(self, session: SolrSession, solr_mock):
        assert session.validate() is True
        assert solr_mock.ping.call_count == 1

    @pytest.mark.parametrize(
        "mode,expected",
        [
            (LivenessMode.ANY_RESPONSE, True),
            (LivenessMode.POSITIVE_QTIME, False),
        ],
    )
    def test_zero_qtime(self, connection_config, solr_mock, mock_responses, mode, expected):
        """A zero QTime only fails the check in positive-QTime mode."""
        solr_mock.ping.mock(return_value=mock_responses["solr"](q_time=0))

        with SolrSession(connection_config, liveness_mode=mode) as session:
            assert session.validate() is expected

    def test_positive_qtime(self, connection_config, solr_mock):
        with SolrSession(connection_config, liveness_mode=LivenessMode.POSITIVE_QTIME) as session:
            assert session.validate() is True

    def test_ping_transport_error(self, session: SolrSession, solr_mock):
        """Ping failures return False without raising."""
        solr_mock.ping.mock(side_effect=httpx.ConnectError)

        assert session.validate() is False
        assert session.is_connected is True

    def test_ping_server_error(self, session: SolrSession, solr_mock):
        solr_mock.ping.mock(return_value=Response(503, text="Service Unavailable"))

        assert session.validate() is False


# ============================================================================
# Settings Tests
# ============================================================================


class TestFromSettings:
    """Tests for building a session from settings."""

    def test_from_settings(self, mock_settings: SolrSettings, solr_url: str):
        session = SolrSession.from_settings(mock_settings)

        assert session.config.server_address == solr_url
        assert session.config.has_credentials is True

    def test_transport(self, mock_settings_minimal: SolrSettings, solr_url: str):
        """A custom transport is used by the client binding."""
        transport = httpx.MockTransport(
            lambda request: Response(200, json={"responseHeader": {"status": 0, "QTime": 1}})
        )

        with SolrSession.from_settings(mock_settings_minimal, transport=transport) as session:
            assert session.validate() is True


# ============================================================================
# Concurrency Tests
# ============================================================================


class TestConcurrentLifecycle:
    """Tests for connect and disconnect racing on one session."""

    def test_connect_disconnect_threads(self, connection_config, monkeypatch):
        """Concurrent connect/disconnect never tears the state or leaks a client."""
        created: list[SolrClient] = []
        lock = threading.Lock()

        class RecordingClient(SolrClient):
            def __init__(self, *args, **kwargs):
                super().__init__(*args, **kwargs)
                with lock:
                    created.append(self)

        monkeypatch.setattr("solrbridge.session.SolrClient", RecordingClient)
        session = SolrSession(connection_config)
        errors: list[BaseException] = []

        def worker(connect_first: bool) -> None:
            try:
                for i in range(50):
                    if (i % 2 == 0) == connect_first:
                        session.connect()
                    else:
                        session.disconnect()
            except BaseException as e:
                errors.append(e)

        threads = [threading.Thread(target=worker, args=(i % 2 == 0,)) for i in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        live = [c for c in created if not c.is_closed]
        if session.is_connected:
            assert live == [session.client]
        else:
            assert live == []

        session.disconnect()
        assert all(c.is_closed for c in created)
        assert len(created) == 8 * 25
