"""
Clinical Decision Layer

Turns a validated stroke assessment into a classification, a calibrated
confidence, a thrombolytic-eligibility verdict and a canonical protocol.

Usage:
    from neuroassist.core.clinical import StrokeDecisionEngine, ALTEPLASE

    engine = StrokeDecisionEngine(agent=ALTEPLASE)
    result = await engine.evaluate(assessment)
"""
from .base import (
    ArmWeakness,
    ClarityBand,
    CTScanImage,
    DiagnosisResult,
    LevelOfConsciousness,
    MagnitudeBand,
    MethodUsed,
    PatientAssessment,
    StrokeType,
)
from .calibration import calibrate
from .eligibility import TPA_WINDOW_MINUTES, is_thrombolytic_eligible
from .engine import StrokeDecisionEngine
from .protocols import (
    AGENT_REGIMES,
    ALTEPLASE,
    TENECTEPLASE,
    ThrombolyticAgentConfig,
    resolve_agent,
    select_protocol,
    select_recommended_action,
)
from .router import (
    ClassificationOutcome,
    ImageAnalysisCapability,
    ImageOutcome,
    ImageVerdict,
    ScoreOutcome,
    classify,
)
from .siriraj import ScoreInterpretation, interpret_score, siriraj_score

__all__ = [
    "ArmWeakness",
    "ClarityBand",
    "CTScanImage",
    "DiagnosisResult",
    "LevelOfConsciousness",
    "MagnitudeBand",
    "MethodUsed",
    "PatientAssessment",
    "StrokeType",
    "calibrate",
    "TPA_WINDOW_MINUTES",
    "is_thrombolytic_eligible",
    "StrokeDecisionEngine",
    "AGENT_REGIMES",
    "ALTEPLASE",
    "TENECTEPLASE",
    "ThrombolyticAgentConfig",
    "resolve_agent",
    "select_protocol",
    "select_recommended_action",
    "ClassificationOutcome",
    "ImageAnalysisCapability",
    "ImageOutcome",
    "ImageVerdict",
    "ScoreOutcome",
    "classify",
    "ScoreInterpretation",
    "interpret_score",
    "siriraj_score",
]
