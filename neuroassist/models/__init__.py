"""
API Models - request and response schemas for the HTTP surface.
"""
from .assessment import (
    AssessmentRequest,
    DiagnosisResponse,
    AgentRegimeResponse,
    AgentListResponse,
    HealthResponse,
    ErrorResponse,
)

__all__ = [
    "AssessmentRequest",
    "DiagnosisResponse",
    "AgentRegimeResponse",
    "AgentListResponse",
    "HealthResponse",
    "ErrorResponse",
]
