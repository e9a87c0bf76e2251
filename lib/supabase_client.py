# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module provides a typed wrapper for Supabase database operations.
# It implements the singleton pattern to reuse a single client connection
# and exposes the handful of filtered table operations the services need:
# - select_rows / fetch_row for reads (optionally with embedded relations)
# - insert_rows / insert_row for creates
# - update_rows / delete_rows for owner-scoped writes
#
# Filters are equality filters ({"column": value}); every row this API
# touches is addressed by id plus user_id or a parent foreign key.
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   rows = SupabaseClient.select_rows("collections", filters={"user_id": uid})
# =============================================================================

from __future__ import annotations

import logging
from typing import Any

from supabase import create_client, Client

from app.config import settings
from lib.utils import normalize_uuid

# Set up logging for this module
logger = logging.getLogger(__name__)

Filters = dict[str, Any]


class SupabaseClientError(Exception):
    """
    Error during Supabase operations.

    Carries a machine-readable code plus a hint on how to fix the problem.
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result


class SupabaseClient:
    """
    Typed wrapper for Supabase database operations.

    Implements singleton pattern - one client instance is shared across
    the application. All methods are class methods for easy access without
    instantiation.

    Example:
        collection = SupabaseClient.fetch_row(
            "collections",
            filters={"id": collection_id, "user_id": user_id},
        )
        if collection is None:
            raise NotFoundError("Collection")
    """

    _instance: Client | None = None

    @classmethod
    def get_client(cls) -> Client:
        """
        Get or create the singleton Supabase client.

        Uses service_role key which bypasses Row Level Security (RLS), so
        ownership must be enforced by the caller through filters.

        Raises:
            SupabaseClientError: If client creation fails
        """
        if cls._instance is None:
            try:
                cls._instance = create_client(
                    settings.SUPABASE_URL,
                    settings.SUPABASE_SERVICE_KEY
                )
                logger.info("Supabase client initialized successfully")
            except Exception as e:
                raise SupabaseClientError(
                    message=f"Failed to create Supabase client: {e}",
                    code="CLIENT_INIT_FAILED",
                    suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file"
                )
        return cls._instance

    @classmethod
    def _normalize_value(cls, value: Any) -> Any:
        """Convert UUIDs to strings for queries."""
        return normalize_uuid(value)

    @classmethod
    def _apply_filters(cls, query: Any, filters: Filters | None) -> Any:
        for column, value in (filters or {}).items():
            query = query.eq(column, cls._normalize_value(value))
        return query

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    @classmethod
    def select_rows(
        cls,
        table: str,
        columns: str = "*",
        filters: Filters | None = None,
        order_by: str | None = None,
        desc: bool = False,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        """
        Select rows from a table.

        Args:
            table: Table name
            columns: PostgREST select string; may embed relations,
                e.g. "*, cards:flashcards(*)" or "*, item_count:study_items(count)"
            filters: Equality filters
            order_by: Column to sort by
            desc: Sort descending when True
            limit: Maximum number of rows

        Returns:
            List of row dicts (empty when nothing matches)

        Raises:
            SupabaseClientError: If the query fails
        """
        client = cls.get_client()

        try:
            query = cls._apply_filters(client.table(table).select(columns), filters)
            if order_by:
                query = query.order(order_by, desc=desc)
            if limit is not None:
                query = query.limit(limit)

            response = query.execute()
            rows = response.data or []

            logger.debug(f"Selected {len(rows)} rows from {table}")
            return rows

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to select from {table}: {e}",
                code="SELECT_FAILED",
                suggestion=f"Check that the {table} table exists and the filters are valid",
                details={"table": table, "filters": {k: str(v) for k, v in (filters or {}).items()}}
            )

    @classmethod
    def fetch_row(
        cls,
        table: str,
        filters: Filters,
        columns: str = "*",
    ) -> dict[str, Any] | None:
        """
        Fetch a single row matching all filters.

        Returns:
            Row dict, or None if not found

        Raises:
            SupabaseClientError: If the query fails
        """
        rows = cls.select_rows(table, columns=columns, filters=filters, limit=1)
        return rows[0] if rows else None

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    @classmethod
    def insert_rows(
        cls,
        table: str,
        rows: list[dict[str, Any]],
    ) -> list[dict[str, Any]]:
        """
        Insert rows and return them with generated columns (id, created_at).

        Raises:
            SupabaseClientError: If insert fails or returns nothing
        """
        if not rows:
            return []

        client = cls.get_client()
        payload = [
            {key: cls._normalize_value(value) for key, value in row.items()}
            for row in rows
        ]

        try:
            response = client.table(table).insert(payload).execute()

            if response.data:
                logger.debug(f"Inserted {len(response.data)} rows into {table}")
                return response.data
            raise SupabaseClientError(
                message="Insert returned no data",
                code="INSERT_NO_DATA",
                details={"table": table}
            )

        except SupabaseClientError:
            raise
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to insert into {table}: {e}",
                code="INSERT_FAILED",
                suggestion="Check required columns and foreign keys",
                details={"table": table, "row_count": len(rows)}
            )

    @classmethod
    def insert_row(cls, table: str, row: dict[str, Any]) -> dict[str, Any]:
        """Insert one row and return it."""
        return cls.insert_rows(table, [row])[0]

    @classmethod
    def update_rows(
        cls,
        table: str,
        values: dict[str, Any],
        filters: Filters,
    ) -> list[dict[str, Any]]:
        """
        Update rows matching filters.

        An empty filter set is refused so a bug can never rewrite a whole table.

        Returns:
            Updated rows

        Raises:
            SupabaseClientError: If the update fails
        """
        if not filters:
            raise SupabaseClientError(
                message=f"Refusing unfiltered update on {table}",
                code="UNFILTERED_WRITE",
            )

        client = cls.get_client()
        payload = {key: cls._normalize_value(value) for key, value in values.items()}

        try:
            query = cls._apply_filters(client.table(table).update(payload), filters)
            response = query.execute()
            rows = response.data or []
            logger.debug(f"Updated {len(rows)} rows in {table}")
            return rows

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to update {table}: {e}",
                code="UPDATE_FAILED",
                details={"table": table, "columns": sorted(values)}
            )

    @classmethod
    def delete_rows(cls, table: str, filters: Filters) -> list[dict[str, Any]]:
        """
        Delete rows matching filters.

        Returns:
            Deleted rows

        Raises:
            SupabaseClientError: If the delete fails
        """
        if not filters:
            raise SupabaseClientError(
                message=f"Refusing unfiltered delete on {table}",
                code="UNFILTERED_WRITE",
            )

        client = cls.get_client()

        try:
            query = cls._apply_filters(client.table(table).delete(), filters)
            response = query.execute()
            rows = response.data or []
            logger.debug(f"Deleted {len(rows)} rows from {table}")
            return rows

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to delete from {table}: {e}",
                code="DELETE_FAILED",
                details={"table": table}
            )
