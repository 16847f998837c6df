"""
Classification Router

Chooses exactly one classification strategy per assessment:

  - CT image present  → external image-analysis capability (its verdict is
                        taken as-is, never reinterpreted)
  - no image          → Siriraj score + interpretation

The two strategies never run together and the score is never used as a
fallback when the image path fails: a failure there surfaces as
ClassificationUnavailableError.

Both strategies produce a ClassificationOutcome (ImageOutcome | ScoreOutcome)
exposing the same stroke_type / method_used / evidence_strength triple, so
calibration, eligibility and protocol selection share one code path.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol, Union, runtime_checkable

from neuroassist.utils import ClassificationUnavailableError, get_logger
from .base import (
    ClarityBand,
    CTScanImage,
    MagnitudeBand,
    MethodUsed,
    PatientAssessment,
    StrokeType,
)
from .siriraj import interpret_score, siriraj_score

logger = get_logger(__name__)

DEFAULT_IMAGE_TIMEOUT_SECONDS = 30.0


# ── Image capability port ────────────────────────────────────────────────────

@dataclass(frozen=True)
class ImageVerdict:
    """What an image-analysis capability returns for one CT scan."""
    stroke_type: StrokeType
    clarity: ClarityBand


@runtime_checkable
class ImageAnalysisCapability(Protocol):
    """Anything that can classify a CT scan given the clinical context."""

    async def analyze_ct(
        self,
        image: CTScanImage,
        clinical_context: Dict[str, Any],
    ) -> ImageVerdict:
        ...


# ── Outcomes ─────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ScoreOutcome:
    stroke_type: StrokeType
    score: float
    band: MagnitudeBand

    @property
    def method_used(self) -> MethodUsed:
        return MethodUsed.SIRIRAJ_SCORE

    @property
    def evidence_strength(self) -> MagnitudeBand:
        return self.band


@dataclass(frozen=True)
class ImageOutcome:
    stroke_type: StrokeType
    clarity: ClarityBand

    @property
    def method_used(self) -> MethodUsed:
        return MethodUsed.IMAGE_ANALYSIS

    @property
    def evidence_strength(self) -> ClarityBand:
        return self.clarity


ClassificationOutcome = Union[ImageOutcome, ScoreOutcome]


# ── Strategies ───────────────────────────────────────────────────────────────

def classify_by_score(assessment: PatientAssessment) -> ScoreOutcome:
    score = siriraj_score(assessment)
    interpretation = interpret_score(score)
    logger.debug(
        f"Router: Siriraj score {score:+.1f} → "
        f"{interpretation.stroke_type.value} ({interpretation.band.value})"
    )
    return ScoreOutcome(
        stroke_type=interpretation.stroke_type,
        score=score,
        band=interpretation.band,
    )


async def classify_by_image(
    assessment: PatientAssessment,
    image_capability: Optional[ImageAnalysisCapability],
    timeout_seconds: float = DEFAULT_IMAGE_TIMEOUT_SECONDS,
) -> ImageOutcome:
    """
    Delegate classification to the image-analysis capability.

    Raises:
        ClassificationUnavailableError: no capability configured, the call
            timed out or failed, or the verdict was malformed.
    """
    if image_capability is None:
        raise ClassificationUnavailableError(
            "A CT scan image was supplied but no image-analysis capability is configured",
            reason="not_configured",
        )

    try:
        verdict = await asyncio.wait_for(
            image_capability.analyze_ct(
                assessment.ct_scan_image, assessment.clinical_context()
            ),
            timeout=timeout_seconds,
        )
    except asyncio.TimeoutError as exc:
        raise ClassificationUnavailableError(
            f"Image analysis did not respond within {timeout_seconds:g}s",
            reason="timeout",
            details={"timeout_seconds": timeout_seconds},
        ) from exc
    except Exception as exc:
        raise ClassificationUnavailableError(
            f"Image analysis failed: {exc}",
            reason="capability_error",
            details={"error_type": type(exc).__name__},
        ) from exc

    if not isinstance(verdict, ImageVerdict):
        raise ClassificationUnavailableError(
            f"Image analysis returned {type(verdict).__name__}, expected ImageVerdict",
            reason="malformed_verdict",
        )
    try:
        stroke_type = StrokeType(verdict.stroke_type)
        clarity = ClarityBand(verdict.clarity)
    except ValueError as exc:
        raise ClassificationUnavailableError(
            f"Image analysis returned an unrecognised verdict: {exc}",
            reason="malformed_verdict",
        ) from exc

    logger.debug(f"Router: image verdict {stroke_type.value} ({clarity.value} clarity)")
    return ImageOutcome(stroke_type=stroke_type, clarity=clarity)


async def classify(
    assessment: PatientAssessment,
    image_capability: Optional[ImageAnalysisCapability] = None,
    timeout_seconds: float = DEFAULT_IMAGE_TIMEOUT_SECONDS,
) -> ClassificationOutcome:
    """Route an assessment to exactly one classification strategy."""
    if assessment.has_image:
        return await classify_by_image(assessment, image_capability, timeout_seconds)
    return classify_by_score(assessment)
