"""
Schema introspection for SQL Server.

Builds the human-readable schema document used as model context: table
names, columns with data types and two sample rows per table.
"""

import asyncio
import json
import logging
from typing import Any, Callable

import aioodbc

logger = logging.getLogger(__name__)

NO_TABLES = "No tables found."

LIST_TABLES_SQL = (
    "SELECT TABLE_NAME FROM INFORMATION_SCHEMA.TABLES "
    "WHERE TABLE_TYPE = 'BASE TABLE' AND TABLE_SCHEMA = ? "
    "ORDER BY TABLE_NAME"
)

LIST_COLUMNS_SQL = (
    "SELECT COLUMN_NAME, DATA_TYPE FROM INFORMATION_SCHEMA.COLUMNS "
    "WHERE TABLE_SCHEMA = ? AND TABLE_NAME = ? "
    "ORDER BY ORDINAL_POSITION"
)

SAMPLE_ROW_COUNT = 2


def quote_identifier(name: str) -> str:
    """Bracket-quote a T-SQL identifier, doubling closing brackets (QUOTENAME rules)."""
    return "[" + name.replace("]", "]]") + "]"


def _json_safe(value: Any) -> Any:
    """Convert non-JSON-serializable values to strings."""
    if value is None or isinstance(value, (int, float, str, bool)):
        return value
    return str(value)


class SchemaIntrospector:
    """
    Reads table and column metadata from INFORMATION_SCHEMA.

    Every call opens and closes its own connection; nothing is cached.
    """

    def __init__(
        self,
        dsn: str,
        schema: str = "dbo",
        connect: Callable[..., Any] = aioodbc.connect,
    ):
        """
        Args:
            dsn: ODBC connection string
            schema: Database schema to introspect
            connect: Connection factory taking dsn= (aioodbc.connect by default)
        """
        self.dsn = dsn
        self.schema = schema
        self._connect = connect

    async def _fetch(self, query: str, *params: Any) -> tuple[list[str], list[tuple]]:
        async with self._connect(dsn=self.dsn) as conn:
            async with conn.cursor() as cursor:
                await cursor.execute(query, *params)
                columns = [column[0] for column in cursor.description] if cursor.description else []
                rows = await cursor.fetchall()
        return columns, [tuple(row) for row in rows]

    async def table_names(self) -> list[str]:
        """Return the base-table names of the configured schema."""
        _, rows = await self._fetch(LIST_TABLES_SQL, self.schema)
        return [row[0] for row in rows]

    async def list_tables(self) -> str:
        """Return table names joined with ', ', or a sentinel when there are none."""
        names = await self.table_names()
        return ", ".join(names) or NO_TABLES

    async def describe_table(self, table_name: str) -> str:
        """
        Describe a table: its columns and up to two sample rows.

        Returns a "not found" message rather than raising when the table
        has no columns in the catalog.
        """
        _, column_rows = await self._fetch(LIST_COLUMNS_SQL, self.schema, table_name)
        if not column_rows:
            return f"Table '{table_name}' not found."

        columns = [f"{name} ({data_type})" for name, data_type in column_rows]

        sample_query = (
            f"SELECT TOP {SAMPLE_ROW_COUNT} * "
            f"FROM {quote_identifier(self.schema)}.{quote_identifier(table_name)}"
        )
        names, rows = await self._fetch(sample_query)
        sample_rows = "\n".join(
            json.dumps({name: _json_safe(value) for name, value in zip(names, row)})
            for row in rows
        )

        return (
            f"Table: {table_name}\n"
            "Columns:\n- " + "\n- ".join(columns) + "\n\n"
            f"Sample Rows:\n{sample_rows}"
        )

    async def load_schema(self) -> str:
        """Describe every table, concurrently, as one schema document."""
        names = await self.table_names()
        logger.info("Tables found: %s", ", ".join(names) or NO_TABLES)
        if not names:
            return NO_TABLES

        descriptions = await asyncio.gather(*(self.describe_table(name) for name in names))
        return "\n\n".join(descriptions)
