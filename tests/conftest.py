# tests/conftest.py

from __future__ import annotations

import uuid

import pytest
from a2a.types import DataPart, Message, Part, Role, TextPart

from sql_agents.config import Settings

from .fakes import FakeDatabase


@pytest.fixture()
def settings() -> Settings:
    """Settings with explicit values so tests do not depend on the environment."""
    return Settings(
        DB_SERVER="sql.test",
        DB_DATABASE="Shop",
        DB_USER="reader",
        DB_PASSWORD="secret",
        DB_SCHEMA="dbo",
        OLLAMA_BASE_URL="http://ollama.test",
        OLLAMA_MODEL="llama3:8b",
        OPTIMIZE_TEMPERATURE=0.3,
        AGENT_HOST="localhost",
        MS_SQL_AGENT_PORT=41242,
        MS_SQL_OPTIMIZE_QUERY_AGENT_PORT=41243,
    )


@pytest.fixture()
def sales_db() -> FakeDatabase:
    """Database with a single Sales(Id, Amount, Date) table."""
    return FakeDatabase(
        tables={"Sales": [("Id", "int"), ("Amount", "decimal"), ("Date", "date")]},
        rows={"Sales": [(1, 10.5, "2024-05-01"), (2, 99.0, "2024-05-02")]},
    )


def user_message(text: str | None, **kwargs) -> Message:
    part = TextPart(text=text) if text is not None else DataPart(data={"sql": None})
    return Message(role=Role.user, message_id=str(uuid.uuid4()), parts=[Part(root=part)], **kwargs)
