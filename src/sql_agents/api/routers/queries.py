"""
Generate-and-optimize query routes.

The pipeline runs either inline (synchronous endpoint) or as a background
job whose status is polled by ID.
"""

import asyncio
import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from sql_agents.api.dependencies import get_job_store, get_pipeline, get_schema
from sql_agents.api.jobs import JobStore
from sql_agents.api.models import (
    ErrorResponse,
    JobCreatedResponse,
    OptimizedQueryResponse,
    QueryRequest,
)
from sql_agents.api.pipeline import QueryPipeline

logger = logging.getLogger(__name__)

router = APIRouter(tags=["queries"])

MISSING_QUERY_ERROR = "Missing query in request body"
PIPELINE_ERROR = "Failed to generate and optimize query"


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


async def _run_job(job_id: str, question: str, schema: str, pipeline: QueryPipeline, job_store: JobStore) -> None:
    try:
        optimized_query = await pipeline.run(question, schema)
    except Exception as e:
        logger.error("Job %s failed: %s", job_id, e, exc_info=True)
        job_store.fail(job_id, PIPELINE_ERROR)
        return
    job_store.complete(job_id, optimized_query)


@router.post("/generate-and-optimize-query")
async def generate_and_optimize_query(
    body: QueryRequest | None = None,
    pipeline: QueryPipeline = Depends(get_pipeline),
    schema: str = Depends(get_schema),
):
    """Generate a MS SQL query for the ask, optimize it and return the result."""
    if body is None or not body.query:
        return _error(400, MISSING_QUERY_ERROR)

    try:
        optimized_query = await pipeline.run(body.query, schema)
    except Exception as e:
        logger.error("Pipeline error: %s", e, exc_info=True)
        return _error(500, PIPELINE_ERROR)

    return JSONResponse(OptimizedQueryResponse(optimized_query=optimized_query).model_dump(by_alias=True))


@router.post("/generate-and-optimize-query/job")
async def generate_and_optimize_query_job(
    body: QueryRequest | None = None,
    pipeline: QueryPipeline = Depends(get_pipeline),
    schema: str = Depends(get_schema),
    job_store: JobStore = Depends(get_job_store),
):
    """Start the pipeline in the background and return the job ID (202)."""
    if body is None or not body.query:
        return _error(400, MISSING_QUERY_ERROR)

    job_id = job_store.create()
    job_store.track(asyncio.create_task(_run_job(job_id, body.query, schema, pipeline, job_store)))

    return JSONResponse(status_code=202, content=JobCreatedResponse(job_id=job_id).model_dump(by_alias=True))


@router.get("/query-status/{job_id}")
async def query_status(job_id: str, job_store: JobStore = Depends(get_job_store)):
    """Return the job record, or 404 if the ID is unknown."""
    job = job_store.get(job_id)
    if job is None:
        return _error(404, "Job not found")
    return JSONResponse(job.model_dump(by_alias=True, exclude_none=True))
