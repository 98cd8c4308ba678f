"""Unit tests for PostgresClient."""
import pytest
import psycopg2
from unittest.mock import Mock, MagicMock, patch
from psycopg2.extras import Json

from event_planner.data_access.postgres_client import PostgresClient
from event_planner.config.settings import Settings
from event_planner.exceptions import DataAccessError, RecordNotFoundError


@pytest.fixture
def mock_config():
    """Create a mock configuration."""
    config = Mock(spec=Settings)
    config.postgres_host = "db.example.supabase.co"
    config.postgres_port = 5432
    config.postgres_database = "postgres"
    config.postgres_username = "postgres"
    config.postgres_password = "secret"
    config.postgres_sslmode = "require"
    return config


@pytest.fixture
def mock_conn():
    """Connection whose cursor returns canned rows."""
    conn = MagicMock()
    conn.closed = 0
    cursor = conn.cursor.return_value.__enter__.return_value
    cursor.fetchall.return_value = [{"id": "row-1"}]
    return conn


@pytest.fixture
def client(mock_config, mock_conn):
    client = PostgresClient(mock_config)
    client.conn = mock_conn
    return client


def executed_params(mock_conn):
    cursor = mock_conn.cursor.return_value.__enter__.return_value
    return cursor.execute.call_args[0][1]


class TestConnection:
    """Test connecting and closing."""

    @patch('event_planner.data_access.postgres_client.psycopg2.connect')
    def test_connect_uses_config(self, mock_connect, mock_config):
        client = PostgresClient(mock_config)
        client.connect()

        mock_connect.assert_called_once_with(
            host="db.example.supabase.co",
            port=5432,
            database="postgres",
            user="postgres",
            password="secret",
            sslmode="require"
        )
        assert client.conn == mock_connect.return_value

    @patch('event_planner.data_access.postgres_client.psycopg2.connect')
    def test_connect_failure_raises_data_access_error(self, mock_connect, mock_config):
        mock_connect.side_effect = psycopg2.OperationalError("could not connect")

        with pytest.raises(DataAccessError):
            PostgresClient(mock_config).connect()

    @patch('event_planner.data_access.postgres_client.psycopg2.connect')
    def test_context_manager_closes(self, mock_connect, mock_config):
        with PostgresClient(mock_config) as client:
            assert client.conn is not None

        mock_connect.return_value.close.assert_called_once()
        assert client.conn is None

    @patch('event_planner.data_access.postgres_client.psycopg2.connect')
    def test_lazy_connect_on_first_statement(self, mock_connect, mock_config):
        client = PostgresClient(mock_config)
        client.select("events")

        mock_connect.assert_called_once()


class TestStatements:
    """Test statement building and execution."""

    def test_select_returns_rows_and_commits(self, client, mock_conn):
        rows = client.select("events")

        assert rows == [{"id": "row-1"}]
        mock_conn.commit.assert_called_once()

    def test_select_params(self, client, mock_conn):
        client.select(
            "event_tasks",
            filters=[("event_id", "eq", "e1"), ("status", "in", ("pending", "in_progress"))],
            limit=5
        )

        assert executed_params(mock_conn) == ["e1", ["pending", "in_progress"], 5]

    def test_unknown_operator(self, client):
        with pytest.raises(ValueError):
            client.select("events", filters=[("title", "like", "%gala%")])

    def test_select_one_missing_row(self, client, mock_conn):
        mock_conn.cursor.return_value.__enter__.return_value.fetchall.return_value = []

        with pytest.raises(RecordNotFoundError):
            client.select_one("events", [("id", "eq", "missing")])

    def test_insert_wraps_json_values(self, client, mock_conn):
        client.insert("user_preferences", {"user_id": "u1", "preferences": {"budget_sensitivity": "low"}})

        params = executed_params(mock_conn)
        assert params[0] == "u1"
        assert isinstance(params[1], Json)

    def test_insert_nothing(self, client, mock_conn):
        assert client.insert("event_tasks", []) == []
        mock_conn.cursor.assert_not_called()

    def test_update_requires_filters(self, client):
        with pytest.raises(ValueError):
            client.update("ai_recommendations", {"is_applied": True}, [])

    def test_update_params(self, client, mock_conn):
        client.update("ai_recommendations", {"is_applied": True}, [("id", "eq", "r1")])
        assert executed_params(mock_conn) == [True, "r1"]

    def test_delete_requires_filters(self, client):
        with pytest.raises(ValueError):
            client.delete("notifications", [])

    def test_upsert_params(self, client, mock_conn):
        client.upsert(
            "ai_vendor_leads",
            {"vendor_id": "v1", "event_id": "e1", "match_score": 80},
            conflict_columns=["vendor_id", "event_id"],
            update_columns=["match_score"]
        )
        assert executed_params(mock_conn) == ["v1", "e1", 80]

    def test_statement_failure_rolls_back(self, client, mock_conn):
        cursor = mock_conn.cursor.return_value.__enter__.return_value
        cursor.execute.side_effect = psycopg2.Error("relation does not exist")

        with pytest.raises(DataAccessError):
            client.select("events")

        mock_conn.rollback.assert_called_once()
        mock_conn.commit.assert_not_called()

    def test_dropped_connection_raises_data_access_error(self, client, mock_conn):
        mock_conn.cursor.side_effect = psycopg2.OperationalError("server closed the connection unexpectedly")
        mock_conn.rollback.side_effect = psycopg2.InterfaceError("connection already closed")

        with pytest.raises(DataAccessError):
            client.select("events")

        mock_conn.close.assert_called_once()
        assert client.conn is None

    def test_closed_connection_skips_rollback(self, client, mock_conn):
        mock_conn.closed = 2
        mock_conn.cursor.side_effect = psycopg2.OperationalError("server closed the connection unexpectedly")

        with pytest.raises(DataAccessError):
            client.select("events")

        mock_conn.rollback.assert_not_called()
        assert client.conn is None

    @patch('event_planner.data_access.postgres_client.psycopg2.connect')
    def test_reconnects_after_dropped_connection(self, mock_connect, client, mock_conn):
        mock_conn.closed = 2
        mock_conn.cursor.side_effect = psycopg2.OperationalError("server closed the connection unexpectedly")
        with pytest.raises(DataAccessError):
            client.select("events")

        client.select("events")

        mock_connect.assert_called_once()
        assert client.conn == mock_connect.return_value
