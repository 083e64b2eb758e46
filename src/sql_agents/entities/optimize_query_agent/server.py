"""
MS-SQL Optimize Query Agent server.
"""

import logging

import uvicorn
from a2a.types import AgentCapabilities, AgentCard, AgentProvider, AgentSkill
from dotenv import load_dotenv
from fastapi import FastAPI

from sql_agents.config import Settings, get_settings
from sql_agents.llm import OllamaChatClient
from sql_agents.tasks import build_agent_app

from .executor import MsSqlOptimizeQueryAgentExecutor
from .flow import OptimizeQueryFlow

logger = logging.getLogger(__name__)


def build_agent_card(settings: Settings) -> AgentCard:
    """Agent card advertised at the well-known agent card paths."""
    return AgentCard(
        name="MS-SQL Optimize Query Agent",
        description="An agent that optimizes MS-SQL queries for better performance.",
        url=f"http://{settings.AGENT_HOST}:{settings.MS_SQL_OPTIMIZE_QUERY_AGENT_PORT}/",
        provider=AgentProvider(organization="A2A Samples", url="https://example.com/a2a-samples"),
        version="0.0.1",
        capabilities=AgentCapabilities(
            streaming=True,
            push_notifications=False,
            state_transition_history=True,
        ),
        default_input_modes=["text"],
        default_output_modes=["text", "file"],
        skills=[
            AgentSkill(
                id="ms_sql_query_optimization",
                name="MS-SQL Query Optimization",
                description=(
                    "Optimizes MS-SQL queries for better performance. "
                    "(replaces queries with optimized versions)"
                ),
                tags=["sql", "database", "optimization", "performance"],
                examples=[
                    "Optimize the following query: SELECT * FROM Orders WHERE OrderDate < GETDATE() - 30",
                    "Improve the performance of this query: "
                    "SELECT SUM(Amount) FROM Transactions GROUP BY AccountId",
                ],
                input_modes=["text"],
                output_modes=["text", "file"],
            ),
        ],
    )


def create_app(settings: Settings | None = None, llm: OllamaChatClient | None = None) -> FastAPI:
    settings = settings or get_settings()
    llm = llm or OllamaChatClient(
        base_url=settings.OLLAMA_BASE_URL,
        model=settings.OLLAMA_MODEL,
        timeout=settings.OLLAMA_TIMEOUT_SECONDS,
    )

    executor = MsSqlOptimizeQueryAgentExecutor(
        OptimizeQueryFlow(llm, temperature=settings.OPTIMIZE_TEMPERATURE)
    )
    return build_agent_app(
        build_agent_card(settings), executor, title="MS-SQL Optimize Query Agent", on_shutdown=llm.aclose
    )


def main() -> None:
    load_dotenv()
    logging.basicConfig(level=logging.INFO, force=True)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    settings = get_settings()
    logger.info("[MsSqlOptimizeQueryAgent] Starting on port %d", settings.MS_SQL_OPTIMIZE_QUERY_AGENT_PORT)
    uvicorn.run(
        "sql_agents.entities.optimize_query_agent.server:create_app",
        factory=True,
        host="0.0.0.0",
        port=settings.MS_SQL_OPTIMIZE_QUERY_AGENT_PORT,
    )


if __name__ == "__main__":
    main()
