# tests/fakes.py

from __future__ import annotations

import asyncio
import re
from dataclasses import dataclass, field
from typing import Any

from a2a.server.events import Event, EventQueue
from a2a.types import TaskStatusUpdateEvent


class FakeChatClient:
    """
    Deterministic model client for unit tests.

    - Returns scripted replies in order (the last one repeats)
    - Captures (prompt, temperature) for assertions
    - Optionally waits on a gate before answering, or raises an error
    """

    def __init__(
        self,
        replies: list[str] | None = None,
        *,
        gate: asyncio.Event | None = None,
        error: Exception | None = None,
    ) -> None:
        self.replies = list(replies or ["SELECT 1"])
        self.gate = gate
        self.error = error
        self.calls: list[tuple[str, float | None]] = []
        self.entered = asyncio.Event()
        self.closed = False

    async def generate(self, prompt: str, *, temperature: float | None = None) -> str:
        self.calls.append((prompt, temperature))
        self.entered.set()
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        index = min(len(self.calls) - 1, len(self.replies) - 1)
        return self.replies[index]

    async def aclose(self) -> None:
        self.closed = True


class FakeIntrospector:
    """Schema source returning a fixed document and counting loads."""

    def __init__(self, schema: str = "Table: Sales\nColumns:\n- Id (int)\n- Amount (decimal)\n- Date (date)") -> None:
        self.schema = schema
        self.loads = 0

    async def load_schema(self) -> str:
        self.loads += 1
        return self.schema


class FakeCursor:
    def __init__(self, db: FakeDatabase) -> None:
        self.db = db
        self.description: list[tuple] | None = None
        self._rows: list[tuple] = []

    async def __aenter__(self) -> FakeCursor:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        return None

    async def execute(self, query: str, *params: Any) -> None:
        self.db.executed.append((query, params))
        if self.db.error is not None:
            raise self.db.error

        if "INFORMATION_SCHEMA.TABLES" in query:
            self.description = [("TABLE_NAME",)]
            self._rows = [(name,) for name in self.db.tables]
        elif "INFORMATION_SCHEMA.COLUMNS" in query:
            _schema, table = params
            self.description = [("COLUMN_NAME",), ("DATA_TYPE",)]
            self._rows = list(self.db.tables.get(table, []))
        elif query.startswith("SELECT TOP"):
            quoted = re.search(r"\.\[(.*)\]$", query).group(1)
            table = quoted.replace("]]", "]")
            self.description = [(name,) for name, _ in self.db.tables[table]]
            self._rows = list(self.db.rows.get(table, []))
        else:
            raise AssertionError(f"Unexpected query: {query}")

    async def fetchall(self) -> list[tuple]:
        return self._rows


class FakeConnection:
    def __init__(self, db: FakeDatabase) -> None:
        self.db = db

    async def __aenter__(self) -> FakeConnection:
        self.db.opened += 1
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        self.db.closed += 1

    def cursor(self) -> FakeCursor:
        return FakeCursor(self.db)


@dataclass
class FakeDatabase:
    """
    In-memory stand-in for an aioodbc connection factory.

    tables maps table name -> [(column, data type)], rows maps table name -> sample rows.
    """

    tables: dict[str, list[tuple[str, str]]] = field(default_factory=dict)
    rows: dict[str, list[tuple]] = field(default_factory=dict)
    error: Exception | None = None
    executed: list[tuple[str, tuple]] = field(default_factory=list)
    opened: int = 0
    closed: int = 0
    dsns: list[str] = field(default_factory=list)

    def connect(self, *, dsn: str) -> FakeConnection:
        self.dsns.append(dsn)
        return FakeConnection(self)


class RecordingEventQueue(EventQueue):
    """Event queue that records enqueued events instead of delivering them."""

    def __init__(self) -> None:
        super().__init__()
        self.events: list[Event] = []

    async def enqueue_event(self, event: Event) -> None:
        self.events.append(event)

    @property
    def kinds(self) -> list[str]:
        return [event.kind for event in self.events]

    @property
    def final_events(self) -> list[TaskStatusUpdateEvent]:
        return [e for e in self.events if isinstance(e, TaskStatusUpdateEvent) and e.final]
