"""
Siriraj Stroke Score

Bedside score separating supratentorial haemorrhage from infarction
without imaging (Poungvarin et al., BMJ 1991):

    score = 2.5*LOC + 2*vomiting + 2*headache + 0.1*diastolic_BP
            - 3*atheroma_markers - 12

    score >  1   → haemorrhage
    score < -1   → infarction
    -1 ≤ s ≤ 1   → equivocal (imaging needed)

Coefficients are fixed clinical constants. The score is evaluated in
tenths and divided once at the end so boundary values (e.g. DBP 130 with
no other findings gives exactly 1.0) are not pushed across a threshold by
binary floating-point error.
"""
from __future__ import annotations

from dataclasses import dataclass

from neuroassist.utils import MissingDataError
from .base import LevelOfConsciousness, MagnitudeBand, PatientAssessment, StrokeType

# ── Coefficients ─────────────────────────────────────────────────────────────
LOC_POINTS = {
    LevelOfConsciousness.CONSCIOUS: 0,
    LevelOfConsciousness.DROWSY:    1,
    LevelOfConsciousness.COMATOSE:  2,
}
LOC_WEIGHT         = 2.5
VOMITING_WEIGHT    = 2
HEADACHE_WEIGHT    = 2
DIASTOLIC_WEIGHT   = 0.1
ATHEROMA_WEIGHT    = 3
CONSTANT           = 12

# ── Interpretation thresholds ────────────────────────────────────────────────
HEMORRHAGIC_ABOVE  = 1.0    # score >  1  → Hemorrhagic
ISCHEMIC_BELOW     = -1.0   # score < -1  → Ischemic
STRONG_ABOVE       = 2.0    # |score| > 2 → strong
WEAK_AT_MOST       = 1.0    # |score| <= 1 → weak


@dataclass(frozen=True)
class ScoreInterpretation:
    stroke_type: StrokeType
    band: MagnitudeBand


def siriraj_score(assessment: PatientAssessment) -> float:
    """
    Compute the Siriraj score for an assessment.

    Raises:
        MissingDataError: if any Siriraj field is absent (only possible for
            assessments validated on the image path).
    """
    missing = [
        name for name, value in (
            ("diastolicBloodPressure", assessment.diastolic_blood_pressure),
            ("levelOfConsciousness", assessment.level_of_consciousness),
            ("vomiting", assessment.vomiting),
            ("headache", assessment.headache),
        )
        if value is None
    ]
    if missing:
        raise MissingDataError(missing)

    loc = LOC_POINTS[assessment.level_of_consciousness]
    v = 1 if assessment.vomiting else 0
    h = 1 if assessment.headache else 0
    a = 1 if assessment.has_atheroma_risk else 0

    # Every term scaled by 10 (0.1*DBP → DBP) and divided back once.
    tenths = (
        int(LOC_WEIGHT * 10) * loc
        + VOMITING_WEIGHT * 10 * v
        + HEADACHE_WEIGHT * 10 * h
        + assessment.diastolic_blood_pressure
        - ATHEROMA_WEIGHT * 10 * a
        - CONSTANT * 10
    )
    return tenths / 10


def magnitude_band(score: float) -> MagnitudeBand:
    magnitude = abs(score)
    if magnitude > STRONG_ABOVE:
        return MagnitudeBand.STRONG
    if magnitude > WEAK_AT_MOST:
        return MagnitudeBand.MODERATE
    return MagnitudeBand.WEAK


def interpret_score(score: float) -> ScoreInterpretation:
    """Map a Siriraj score to a stroke type and a certainty band."""
    if score > HEMORRHAGIC_ABOVE:
        stroke_type = StrokeType.HEMORRHAGIC
    elif score < ISCHEMIC_BELOW:
        stroke_type = StrokeType.ISCHEMIC
    else:
        stroke_type = StrokeType.UNCERTAIN
    return ScoreInterpretation(stroke_type=stroke_type, band=magnitude_band(score))
