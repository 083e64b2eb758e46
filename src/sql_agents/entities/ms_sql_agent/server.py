"""
MS-SQL Agent server.

Serves the agent card and the task protocol endpoint for the natural-language
to MS SQL agent.
"""

import logging

import uvicorn
from a2a.types import AgentCapabilities, AgentCard, AgentProvider, AgentSkill
from dotenv import load_dotenv
from fastapi import FastAPI

from sql_agents.config import Settings, get_settings
from sql_agents.llm import OllamaChatClient
from sql_agents.tasks import build_agent_app

from .executor import MsSqlAgentExecutor
from .flow import GenerateQueryFlow
from .tools import SchemaIntrospector

logger = logging.getLogger(__name__)


def build_agent_card(settings: Settings) -> AgentCard:
    """Agent card advertised at the well-known agent card paths."""
    return AgentCard(
        name="MS-SQL Agent",
        description="An agent that interacts with MS-SQL database to list tables and get schema.",
        url=f"http://{settings.AGENT_HOST}:{settings.MS_SQL_AGENT_PORT}/",
        provider=AgentProvider(organization="A2A Samples", url="https://example.com/a2a-samples"),
        version="0.0.1",
        capabilities=AgentCapabilities(
            streaming=True,
            push_notifications=False,
            state_transition_history=True,
        ),
        default_input_modes=["text"],
        default_output_modes=["text"],
        skills=[
            AgentSkill(
                id="ms_sql_database_interaction",
                name="MS-SQL Database Interaction",
                description=(
                    "Interacts with MS-SQL database to list tables and get schema for a given table."
                ),
                tags=["sql", "database", "mssql"],
                examples=[
                    "List all tables in the database.",
                    "Show schema of Orders table.",
                ],
                input_modes=["text"],
                output_modes=["text"],
            ),
        ],
    )


def create_app(
    settings: Settings | None = None,
    llm: OllamaChatClient | None = None,
    introspector: SchemaIntrospector | None = None,
) -> FastAPI:
    """Wire the executor to its flow, schema introspector and model client."""
    settings = settings or get_settings()
    llm = llm or OllamaChatClient(
        base_url=settings.OLLAMA_BASE_URL,
        model=settings.OLLAMA_MODEL,
        timeout=settings.OLLAMA_TIMEOUT_SECONDS,
    )
    introspector = introspector or SchemaIntrospector(settings.odbc_dsn, schema=settings.DB_SCHEMA)

    executor = MsSqlAgentExecutor(introspector, GenerateQueryFlow(llm))
    return build_agent_app(
        build_agent_card(settings), executor, title="MS-SQL Agent", on_shutdown=llm.aclose
    )


def main() -> None:
    load_dotenv()
    logging.basicConfig(level=logging.INFO, force=True)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    settings = get_settings()
    logger.info("[MsSqlAgent] Starting on port %d", settings.MS_SQL_AGENT_PORT)
    uvicorn.run(
        "sql_agents.entities.ms_sql_agent.server:create_app",
        factory=True,
        host="0.0.0.0",
        port=settings.MS_SQL_AGENT_PORT,
    )


if __name__ == "__main__":
    main()
