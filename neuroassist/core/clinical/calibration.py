"""
Confidence Calibration

Maps the evidence strength of a classification to a fixed confidence.
Each band is collapsed to its midpoint so repeated evaluations of the same
assessment always report the same number.

    SirirajScore   strong    0.85–0.95  → 0.90
    SirirajScore   moderate  0.60–0.84  → 0.72
    SirirajScore   weak      0.40–0.59  → 0.495
    ImageAnalysis  high      0.80–1.00  → 0.90
    ImageAnalysis  medium    0.50–0.79  → 0.645
    ImageAnalysis  low       0.00–0.50  → 0.25
"""
from __future__ import annotations

from typing import Dict, Tuple, Union

from .base import ClarityBand, MagnitudeBand, MethodUsed

EvidenceStrength = Union[MagnitudeBand, ClarityBand]

CONFIDENCE_BANDS: Dict[MethodUsed, Dict[EvidenceStrength, Tuple[float, float]]] = {
    MethodUsed.SIRIRAJ_SCORE: {
        MagnitudeBand.STRONG:   (0.85, 0.95),
        MagnitudeBand.MODERATE: (0.60, 0.84),
        MagnitudeBand.WEAK:     (0.40, 0.59),
    },
    MethodUsed.IMAGE_ANALYSIS: {
        ClarityBand.HIGH:   (0.80, 1.00),
        ClarityBand.MEDIUM: (0.50, 0.79),
        ClarityBand.LOW:    (0.00, 0.50),
    },
}


def band_midpoint(low: float, high: float) -> float:
    return round((low + high) / 2, 4)


def calibrate(method_used: MethodUsed, evidence_strength: EvidenceStrength) -> float:
    """
    Return the calibrated confidence for a method and its evidence strength.

    Raises:
        TypeError: if the strength does not belong to the method, e.g. a
            clarity band reported for the Siriraj path.
    """
    bands = CONFIDENCE_BANDS[method_used]
    if evidence_strength not in bands:
        raise TypeError(
            f"{evidence_strength!r} is not an evidence strength for {method_used.value}"
        )
    low, high = bands[evidence_strength]
    return band_midpoint(low, high)
