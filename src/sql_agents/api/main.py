"""
Aggregator FastAPI server chaining the generate and optimize flows.

This module handles application setup, lifespan management, and middleware configuration.
Route handlers are organized in the routers/ package.

The database schema is captured once at start-up and reused for every request;
it is not refreshed while the process runs.
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from sql_agents.api.jobs import JobStore
from sql_agents.api.models import ErrorResponse
from sql_agents.api.pipeline import QueryPipeline
from sql_agents.api.routers import queries_router
from sql_agents.api.routers.queries import MISSING_QUERY_ERROR
from sql_agents.config import Settings, get_settings
from sql_agents.entities.ms_sql_agent.flow import GenerateQueryFlow
from sql_agents.entities.ms_sql_agent.tools import SchemaIntrospector
from sql_agents.entities.optimize_query_agent.flow import OptimizeQueryFlow
from sql_agents.llm import OllamaChatClient

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    llm: OllamaChatClient | None = None,
    introspector: SchemaIntrospector | None = None,
    job_store: JobStore | None = None,
) -> FastAPI:
    """
    Create the aggregator application.

    Collaborators default to the configured ones; tests pass fakes.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(application: FastAPI):
        """
        Application lifespan handler.

        Loads the schema and wires the pipeline on startup, closes the model client on shutdown.
        """
        chat_client = llm or OllamaChatClient(
            base_url=settings.OLLAMA_BASE_URL,
            model=settings.OLLAMA_MODEL,
            timeout=settings.OLLAMA_TIMEOUT_SECONDS,
        )
        schema_source = introspector or SchemaIntrospector(settings.odbc_dsn, schema=settings.DB_SCHEMA)

        application.state.schema = await schema_source.load_schema()
        application.state.pipeline = QueryPipeline(
            GenerateQueryFlow(chat_client),
            OptimizeQueryFlow(chat_client, temperature=settings.OPTIMIZE_TEMPERATURE),
        )
        application.state.job_store = job_store or JobStore()
        logger.info("Query pipeline initialized (schema: %d chars)", len(application.state.schema))

        yield

        # Shutdown: Cleanup
        await chat_client.aclose()
        logger.info("Chat client closed")

    app = FastAPI(title="SQL Agents API", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ALLOW_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def invalid_body_handler(request: Request, exc: RequestValidationError):
        """Malformed or mistyped request bodies get the same 400 as a missing query."""
        logger.warning("Rejected request body on %s: %s", request.url.path, exc.errors())
        return JSONResponse(status_code=400, content=ErrorResponse(error=MISSING_QUERY_ERROR).model_dump())

    app.include_router(queries_router)

    @app.get("/health")
    async def health_check(request: Request):
        """Health check endpoint."""
        pipeline_ready = getattr(request.app.state, "pipeline", None) is not None
        return {"status": "healthy", "agent_ready": pipeline_ready}

    return app


def main() -> None:
    load_dotenv()

    # Configure logging - use force=True to prevent duplicate handlers
    logging.basicConfig(level=logging.INFO, force=True)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    settings = get_settings()
    logger.info("Server is running on http://localhost:%d", settings.API_PORT)
    uvicorn.run("sql_agents.api.main:create_app", factory=True, host="0.0.0.0", port=settings.API_PORT)


if __name__ == "__main__":
    main()
