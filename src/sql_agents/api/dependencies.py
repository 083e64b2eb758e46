"""
FastAPI dependencies for shared application state.
"""

from fastapi import HTTPException, Request

from .jobs import JobStore
from .pipeline import QueryPipeline


def get_pipeline(request: Request) -> QueryPipeline:
    """
    Get the query pipeline from app state.

    Raises HTTPException 503 if not initialized.
    """
    pipeline = getattr(request.app.state, "pipeline", None)
    if pipeline is None:
        raise HTTPException(status_code=503, detail="Pipeline not initialized")
    return pipeline


def get_job_store(request: Request) -> JobStore:
    """
    Get the job store from app state.

    Raises HTTPException 503 if not initialized.
    """
    job_store = getattr(request.app.state, "job_store", None)
    if job_store is None:
        raise HTTPException(status_code=503, detail="Job store not initialized")
    return job_store


def get_schema(request: Request) -> str:
    """
    Get the schema document captured at start-up.

    Raises HTTPException 503 if not loaded.
    """
    schema = getattr(request.app.state, "schema", None)
    if schema is None:
        raise HTTPException(status_code=503, detail="Schema not loaded")
    return schema
