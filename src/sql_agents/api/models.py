"""
Pydantic models for API request/response schemas.
"""

from typing import Literal

from pydantic import BaseModel, Field


class QueryRequest(BaseModel):
    """Request body for the generate-and-optimize endpoints."""
    query: str | None = None


class OptimizedQueryResponse(BaseModel):
    """Result of the generate-then-optimize pipeline."""
    optimized_query: str = Field(serialization_alias="optimizedQuery")


class JobCreatedResponse(BaseModel):
    job_id: str = Field(serialization_alias="jobId")


class JobRecord(BaseModel):
    """Status of a background generate-and-optimize job."""
    status: Literal["pending", "completed", "failed"] = "pending"
    result: OptimizedQueryResponse | None = None
    error: str | None = None


class ErrorResponse(BaseModel):
    error: str
