"""
API request/response models for stroke assessments.

The request body is the typed intake model from the validation layer, so
FastAPI and validate_assessment enforce the same rules and every rejection
is translated into the same error shape.
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from neuroassist.core.validation import AssessmentIntake


class AssessmentRequest(AssessmentIntake):
    """Intake form submission. Legacy keys (timeSinceOnset, bloodPressure) are accepted."""


class DiagnosisResponse(BaseModel):
    """Result of one stroke assessment."""
    strokeType: str
    confidence: float
    confidencePercent: int
    thrombolyticEligible: bool
    methodUsed: str
    recommendedAction: str
    actionProtocol: str
    agentName: str
    sirirajScore: Optional[float] = None


class AgentRegimeResponse(BaseModel):
    key: str
    agentName: str
    doseMgPerKg: float
    maxDoseMg: float
    bolusPercentage: float
    schemaVersion: int


class AgentListResponse(BaseModel):
    active: str
    agents: List[AgentRegimeResponse]


class HealthResponse(BaseModel):
    status: str
    version: str
    agent: str
    image_analysis: bool


class ErrorResponse(BaseModel):
    error: str
    message: str
    details: Dict[str, Any] = Field(default_factory=dict)
