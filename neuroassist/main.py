"""
NeuroAssist - FastAPI Application

API endpoints for:
- Stroke assessment (classification, confidence, eligibility, protocol)
- Thrombolytic regime reference
- Health checks

Run with:
    uvicorn neuroassist.main:app --reload
"""
from functools import lru_cache
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from neuroassist import __version__
from neuroassist.config import Settings, get_settings
from neuroassist.core.clinical import (
    AGENT_REGIMES,
    ImageAnalysisCapability,
    StrokeDecisionEngine,
    resolve_agent,
)
from neuroassist.core.llm import GeminiConfig, GeminiCTAnalyzer
from neuroassist.core.validation import to_assessment_error
from neuroassist.models import (
    AgentListResponse,
    AgentRegimeResponse,
    AssessmentRequest,
    DiagnosisResponse,
    ErrorResponse,
    HealthResponse,
)
from neuroassist.utils import (
    ClassificationUnavailableError,
    StrokeAssessmentError,
    ValidationError,
    get_logger,
    setup_logging,
)

_settings = get_settings()
setup_logging(_settings.log_level, _settings.log_file)
logger = get_logger(__name__)


# ---- Engine Construction ----

def gemini_config(settings: Settings) -> GeminiConfig:
    return GeminiConfig(
        api_key=settings.gemini_api_key,
        model=settings.gemini_model,
        temperature=settings.gemini_temperature,
        request_timeout_seconds=settings.image_timeout_seconds,
    )


def build_image_capability(settings: Settings) -> Optional[ImageAnalysisCapability]:
    """Gemini CT analyzer, or None when disabled or missing an API key."""
    if not settings.enable_image_analysis:
        logger.info("Image analysis disabled by configuration")
        return None

    analyzer = GeminiCTAnalyzer(gemini_config(settings))
    return analyzer if analyzer.is_available else None


def build_engine(
    settings: Settings,
    image_capability: Optional[ImageAnalysisCapability] = None,
) -> StrokeDecisionEngine:
    """
    Build the decision engine from settings.

    Raises:
        ConfigurationError: unknown or inconsistent thrombolytic regime.
    """
    agent = resolve_agent(
        settings.thrombolytic_agent,
        dose_mg_per_kg=settings.agent_dose_mg_per_kg,
        max_dose_mg=settings.agent_max_dose_mg,
        bolus_percentage=settings.agent_bolus_percentage,
    )
    return StrokeDecisionEngine(
        agent=agent,
        image_capability=image_capability,
        image_timeout_seconds=settings.image_timeout_seconds,
    )


@lru_cache()
def get_engine() -> StrokeDecisionEngine:
    settings = get_settings()
    return build_engine(settings, build_image_capability(settings))


# ---- FastAPI Application ----

app = FastAPI(
    title="NeuroAssist Stroke Decision API",
    description="Stroke-type classification, thrombolytic eligibility and action protocols",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _status_for(exc: StrokeAssessmentError) -> int:
    if isinstance(exc, ValidationError):
        return 422
    if isinstance(exc, ClassificationUnavailableError):
        return 503
    # ConfigurationError and anything unclassified
    return 500


@app.exception_handler(StrokeAssessmentError)
async def stroke_assessment_error_handler(request: Request, exc: StrokeAssessmentError):
    status_code = _status_for(exc)
    if status_code >= 500:
        logger.error(f"{request.url.path} failed: [{exc.code}] {exc.message}")
    else:
        logger.info(f"{request.url.path} rejected: [{exc.code}] {exc.message}")
    return JSONResponse(status_code=status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    return await stroke_assessment_error_handler(request, to_assessment_error(exc.errors()))


# ---- API Endpoints ----

@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check(engine: StrokeDecisionEngine = Depends(get_engine)):
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        version=__version__,
        agent=engine.agent.name,
        image_analysis=engine.image_analysis_enabled,
    )


@app.get("/api/v1/agents", response_model=AgentListResponse, tags=["Reference"])
async def list_agents(engine: StrokeDecisionEngine = Depends(get_engine)):
    """List built-in thrombolytic regimes and the one in use."""
    return AgentListResponse(
        active=engine.agent.name,
        agents=[
            AgentRegimeResponse(key=key, **regime.to_dict())
            for key, regime in AGENT_REGIMES.items()
        ],
    )


@app.post(
    "/api/v1/assessments",
    response_model=DiagnosisResponse,
    responses={
        422: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
    tags=["Assessment"],
)
async def create_assessment(
    request: AssessmentRequest,
    engine: StrokeDecisionEngine = Depends(get_engine),
):
    """
    Evaluate one stroke assessment.

    Without a CT image the Siriraj score is used and diastolic BP, level of
    consciousness, vomiting and headache are required. With an image the
    configured image-analysis capability classifies it; if that fails the
    request fails with 503 rather than falling back to the score.
    """
    result = await engine.evaluate(request.to_assessment())
    return DiagnosisResponse(**result.to_dict())
