# event_planner/data_access/postgres_client.py
"""
Row-oriented client for the Supabase Postgres database.

Exposes select / insert / update / upsert / delete over named tables with
simple filter predicates. Every call commits on its own; there is no
transaction spanning calls.
"""

import psycopg2
from psycopg2 import sql
from psycopg2.extras import Json, RealDictCursor
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union
import logging

from event_planner.config.settings import Settings
from event_planner.exceptions import DataAccessError, RecordNotFoundError

logger = logging.getLogger(__name__)

# (column, operator, value)
Filter = Tuple[str, str, Any]

FILTER_OPERATORS = {
    "eq": "=",
    "neq": "<>",
    "gt": ">",
    "gte": ">=",
    "lt": "<",
    "lte": "<=",
    "is": "IS",
}


class PostgresClient:
    """Generic persistence boundary over Postgres tables."""

    def __init__(self, config: Settings):
        self.config = config
        self.conn = None

    def connect(self) -> None:
        """Establish database connection."""
        try:
            self.conn = psycopg2.connect(
                host=self.config.postgres_host,
                port=self.config.postgres_port,
                database=self.config.postgres_database,
                user=self.config.postgres_username,
                password=self.config.postgres_password,
                sslmode=self.config.postgres_sslmode
            )
        except psycopg2.Error as e:
            logger.error(f"Could not connect to database at {self.config.postgres_host}: {e}")
            raise DataAccessError(f"Database unavailable: {e}") from e

    def close(self) -> None:
        """Close database connection."""
        if self.conn:
            self.conn.close()
            self.conn = None

    def __enter__(self):
        if not self.conn:
            self.connect()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    # ------------------------------------------------------------------
    # Statement helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _adapt(value: Any) -> Any:
        """Wrap dicts and lists so they are stored as JSON."""
        if isinstance(value, (dict, list)):
            return Json(value)
        return value

    @staticmethod
    def _where(filters: Optional[Sequence[Filter]]) -> Tuple[sql.Composable, List[Any]]:
        if not filters:
            return sql.SQL(""), []

        clauses = []
        params = []
        for column, op, value in filters:
            if op == "in":
                clauses.append(sql.SQL("{} = ANY(%s)").format(sql.Identifier(column)))
                params.append(list(value))
                continue
            if op not in FILTER_OPERATORS:
                raise ValueError(f"Unsupported filter operator '{op}'. Supported: {list(FILTER_OPERATORS) + ['in']}")
            clauses.append(
                sql.SQL("{} {} %s").format(sql.Identifier(column), sql.SQL(FILTER_OPERATORS[op]))
            )
            params.append(value)

        return sql.SQL(" WHERE ") + sql.SQL(" AND ").join(clauses), params

    def _recover(self) -> None:
        """Roll back after a failed statement, dropping the connection if it is gone."""
        if self.conn.closed == 0:
            try:
                self.conn.rollback()
                return
            except psycopg2.Error as e:
                logger.warning(f"Rollback failed, discarding connection: {e}")
        # close() is a no-op on a connection the server already dropped
        self.conn.close()
        self.conn = None

    def _execute(self, query: sql.Composable, params: Sequence[Any]) -> List[Dict[str, Any]]:
        if not self.conn:
            self.connect()

        try:
            with self.conn.cursor(cursor_factory=RealDictCursor) as cursor:
                cursor.execute(query, params)
                rows = cursor.fetchall() if cursor.description else []
            self.conn.commit()
        except psycopg2.Error as e:
            logger.error(f"Database statement failed: {e}")
            self._recover()
            raise DataAccessError(str(e)) from e

        return [dict(row) for row in rows]

    # ------------------------------------------------------------------
    # Row operations
    # ------------------------------------------------------------------

    def select(
        self,
        table: str,
        filters: Optional[Sequence[Filter]] = None,
        columns: Optional[Sequence[str]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        """
        Select rows from a table.

        Args:
            table: Table name
            filters: List of (column, operator, value) predicates joined with AND
            columns: Columns to return (all when None)
            order_by: Optional column to order by
            descending: Order direction
            limit: Maximum number of rows

        Returns:
            List of rows as dicts
        """
        selected = (
            sql.SQL(", ").join(sql.Identifier(c) for c in columns)
            if columns else sql.SQL("*")
        )
        where, params = self._where(filters)
        query = sql.SQL("SELECT {} FROM {}").format(selected, sql.Identifier(table)) + where

        if order_by:
            query += sql.SQL(" ORDER BY {} {}").format(
                sql.Identifier(order_by), sql.SQL("DESC" if descending else "ASC")
            )
        if limit is not None:
            query += sql.SQL(" LIMIT %s")
            params.append(limit)

        return self._execute(query, params)

    def select_one(self, table: str, filters: Sequence[Filter]) -> Dict[str, Any]:
        """Select exactly one row, raising RecordNotFoundError when absent."""
        rows = self.select(table, filters=filters, limit=1)
        if not rows:
            raise RecordNotFoundError(f"No row in '{table}' matching {list(filters)}")
        return rows[0]

    def insert(
        self,
        table: str,
        rows: Union[Dict[str, Any], Iterable[Dict[str, Any]]]
    ) -> List[Dict[str, Any]]:
        """Insert one or more rows and return them as stored."""
        if isinstance(rows, dict):
            rows = [rows]
        rows = list(rows)
        if not rows:
            return []

        columns = list(rows[0].keys())
        values_sql = sql.SQL(", ").join(
            sql.SQL("({})").format(sql.SQL(", ").join(sql.Placeholder() * len(columns)))
            for _ in rows
        )
        params = [self._adapt(row.get(c)) for row in rows for c in columns]

        query = sql.SQL("INSERT INTO {} ({}) VALUES {} RETURNING *").format(
            sql.Identifier(table),
            sql.SQL(", ").join(sql.Identifier(c) for c in columns),
            values_sql
        )
        return self._execute(query, params)

    def update(
        self,
        table: str,
        values: Dict[str, Any],
        filters: Sequence[Filter]
    ) -> List[Dict[str, Any]]:
        """Update matching rows and return them."""
        if not filters:
            raise ValueError("update requires at least one filter")

        assignments = sql.SQL(", ").join(
            sql.SQL("{} = %s").format(sql.Identifier(c)) for c in values
        )
        where, where_params = self._where(filters)
        query = sql.SQL("UPDATE {} SET {}").format(sql.Identifier(table), assignments) + where
        query += sql.SQL(" RETURNING *")

        params = [self._adapt(v) for v in values.values()] + where_params
        return self._execute(query, params)

    def upsert(
        self,
        table: str,
        rows: Union[Dict[str, Any], Iterable[Dict[str, Any]]],
        conflict_columns: Sequence[str],
        update_columns: Optional[Sequence[str]] = None
    ) -> List[Dict[str, Any]]:
        """
        Insert rows, updating on conflict with the given unique key.

        Args:
            table: Table name
            rows: Row or rows to write
            conflict_columns: Columns of the unique constraint
            update_columns: Columns overwritten on conflict. Defaults to every
                non-key column; an empty list leaves existing rows untouched.

        Returns:
            Rows as stored
        """
        if isinstance(rows, dict):
            rows = [rows]
        rows = list(rows)
        if not rows:
            return []

        columns = list(rows[0].keys())
        if update_columns is None:
            update_columns = [c for c in columns if c not in conflict_columns]

        values_sql = sql.SQL(", ").join(
            sql.SQL("({})").format(sql.SQL(", ").join(sql.Placeholder() * len(columns)))
            for _ in rows
        )
        params = [self._adapt(row.get(c)) for row in rows for c in columns]

        query = sql.SQL("INSERT INTO {} ({}) VALUES {} ON CONFLICT ({})").format(
            sql.Identifier(table),
            sql.SQL(", ").join(sql.Identifier(c) for c in columns),
            values_sql,
            sql.SQL(", ").join(sql.Identifier(c) for c in conflict_columns)
        )
        if update_columns:
            query += sql.SQL(" DO UPDATE SET {}").format(
                sql.SQL(", ").join(
                    sql.SQL("{0} = EXCLUDED.{0}").format(sql.Identifier(c)) for c in update_columns
                )
            )
        else:
            query += sql.SQL(" DO NOTHING")
        query += sql.SQL(" RETURNING *")

        return self._execute(query, params)

    def delete(self, table: str, filters: Sequence[Filter]) -> List[Dict[str, Any]]:
        """Delete matching rows and return them."""
        if not filters:
            raise ValueError("delete requires at least one filter")

        where, params = self._where(filters)
        query = sql.SQL("DELETE FROM {}").format(sql.Identifier(table)) + where
        query += sql.SQL(" RETURNING *")
        return self._execute(query, params)
