# portfolio_journal/schemas/errors.py
"""
Pydantic schemas for error responses.

One error format across all endpoints, produced by the global exception
handlers in main.py. Every body carries the request's correlation ID so a
user-reported error can be matched to its log lines.
"""

from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    """Standard error response format."""

    error: str = Field(
        ...,
        description="Error type (e.g., 'InvestmentNotFoundError')",
        examples=["InvestmentNotFoundError", "PermissionDeniedError"],
    )
    message: str = Field(..., description="Human-readable error message")
    details: dict | None = Field(default=None, description="Additional error context")
    correlation_id: str | None = Field(
        default=None,
        description="Correlation ID of the failed request (also in X-Correlation-ID)",
    )


class ValidationErrorDetail(BaseModel):
    """Request validation failure (422), one entry per invalid field."""

    error: str = Field(default="ValidationError")
    message: str = Field(default="Request validation failed")
    details: list[dict] = Field(..., description="List of validation errors")
    correlation_id: str | None = Field(default=None)
