"""
Stroke Decision Engine

Runs one assessment through the full pipeline:

    Intake → Validated → Routed → Classified → Calibrated
           → EligibilityDetermined → ProtocolSelected → Done

with two terminal failures: Intake → Rejected (ValidationError) and
Routed → Failed (ClassificationUnavailableError). There is no implicit
fallback from the image path to the Siriraj path and no partial result.

Usage:
    from neuroassist.core.clinical import StrokeDecisionEngine, TENECTEPLASE

    engine = StrokeDecisionEngine(agent=TENECTEPLASE)
    result = await engine.evaluate_raw(form_data)
    print(result.stroke_type, result.confidence, result.action_protocol)
"""
from __future__ import annotations

from typing import Any, Mapping, Optional

from neuroassist.utils import get_logger
from .base import DiagnosisResult, PatientAssessment
from .calibration import calibrate
from .eligibility import is_thrombolytic_eligible
from .protocols import ThrombolyticAgentConfig, select_protocol, select_recommended_action
from .router import (
    DEFAULT_IMAGE_TIMEOUT_SECONDS,
    ImageAnalysisCapability,
    ScoreOutcome,
    classify,
)

logger = get_logger(__name__)


class StrokeDecisionEngine:
    """
    Transforms a PatientAssessment into a DiagnosisResult.

    Configuration (agent regime, image capability, timeout) is fixed at
    construction; nothing per-evaluation is stored on the instance, so one
    engine can serve any number of concurrent requests.
    """

    def __init__(
        self,
        agent: ThrombolyticAgentConfig,
        image_capability: Optional[ImageAnalysisCapability] = None,
        image_timeout_seconds: float = DEFAULT_IMAGE_TIMEOUT_SECONDS,
    ):
        """
        Args:
            agent: Thrombolytic regime used in the eligible-ischemic protocol.
            image_capability: Classifier for CT images; None disables the
                image path (assessments with an image then fail).
            image_timeout_seconds: Upper bound on one image-analysis call.

        Raises:
            ConfigurationError: the agent regime is inconsistent.
        """
        self.agent = agent.validate()
        self.image_capability = image_capability
        self.image_timeout_seconds = image_timeout_seconds
        logger.info(
            f"StrokeDecisionEngine initialized (agent={agent.name}, "
            f"image_analysis={'on' if image_capability is not None else 'off'})"
        )

    @property
    def image_analysis_enabled(self) -> bool:
        return self.image_capability is not None

    async def evaluate(self, assessment: PatientAssessment) -> DiagnosisResult:
        """
        Evaluate a validated assessment.

        Raises:
            ClassificationUnavailableError: the image path failed.
            ConfigurationError: the agent regime is inconsistent.
        """
        outcome = await classify(
            assessment, self.image_capability, self.image_timeout_seconds
        )
        logger.debug(
            f"Classified via {outcome.method_used.value}: {outcome.stroke_type.value}"
        )

        confidence = calibrate(outcome.method_used, outcome.evidence_strength)
        logger.debug(f"Calibrated confidence {confidence}")

        eligible = is_thrombolytic_eligible(
            outcome.stroke_type, assessment.time_since_onset_minutes
        )
        logger.debug(f"Eligibility determined: {eligible}")

        protocol = select_protocol(outcome.stroke_type, eligible, self.agent)
        action = select_recommended_action(outcome.stroke_type, eligible)

        result = DiagnosisResult(
            stroke_type=outcome.stroke_type,
            confidence=confidence,
            thrombolytic_eligible=eligible,
            method_used=outcome.method_used,
            recommended_action=action,
            action_protocol=protocol,
            agent_name=self.agent.name,
            siriraj_score=outcome.score if isinstance(outcome, ScoreOutcome) else None,
        )
        logger.info(
            f"StrokeDecisionEngine: {result.stroke_type.value} via "
            f"{result.method_used.value} (confidence {result.confidence_percent}%, "
            f"eligible={result.thrombolytic_eligible})"
        )
        return result

    async def evaluate_raw(self, raw: Mapping[str, Any]) -> DiagnosisResult:
        """
        Validate raw intake data, then evaluate it.

        Raises:
            ValidationError / MissingDataError: the input was rejected.
            ClassificationUnavailableError: the image path failed.
        """
        # validation imports clinical.base; import here to keep the package acyclic
        from neuroassist.core.validation import validate_assessment

        assessment = validate_assessment(raw)
        logger.debug("Assessment validated")
        return await self.evaluate(assessment)
