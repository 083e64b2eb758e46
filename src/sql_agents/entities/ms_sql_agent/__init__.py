"""
MS-SQL Agent - natural language to MS SQL.

The agent:
1. Introspects the database schema (tables, columns, sample rows)
2. Asks the model for a MS SQL query answering the user's request
3. Returns the query as the task's completion message

Run with:
    ms-sql-agent
"""

from .executor import MsSqlAgentExecutor
from .flow import GenerateQueryFlow, build_generation_prompt
from .tools import SchemaIntrospector

__all__ = ["GenerateQueryFlow", "MsSqlAgentExecutor", "SchemaIntrospector", "build_generation_prompt"]
