"""
Clinical Decision Layer — Base Types

Value objects shared by every stage of the stroke decision pipeline.
Both PatientAssessment and DiagnosisResult are frozen: an assessment is
built once per request by the validator and a result is produced once and
handed to the caller.
"""
from __future__ import annotations

import base64
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class StrokeType(str, Enum):
    ISCHEMIC    = "Ischemic"
    HEMORRHAGIC = "Hemorrhagic"
    UNCERTAIN   = "Uncertain"


class MethodUsed(str, Enum):
    """Which classification strategy produced the stroke type."""
    IMAGE_ANALYSIS = "ImageAnalysis"
    SIRIRAJ_SCORE  = "SirirajScore"


class ArmWeakness(str, Enum):
    NONE  = "None"
    LEFT  = "Left"
    RIGHT = "Right"
    BOTH  = "Both"


class LevelOfConsciousness(str, Enum):
    CONSCIOUS = "Conscious"
    DROWSY    = "Drowsy"
    COMATOSE  = "Comatose"


class MagnitudeBand(str, Enum):
    """
    Certainty of a Siriraj verdict, from the absolute score.

    STRONG   – |score| > 2
    MODERATE – 1 < |score| <= 2
    WEAK     – |score| <= 1 (the indeterminate zone)
    """
    STRONG   = "strong"
    MODERATE = "moderate"
    WEAK     = "weak"


class ClarityBand(str, Enum):
    """How unambiguous the image-analysis capability judged its own verdict."""
    HIGH   = "high"
    MEDIUM = "medium"
    LOW    = "low"


@dataclass(frozen=True)
class CTScanImage:
    """
    Opaque reference to a CT scan: either inline bytes with a MIME type,
    or a URI (data: or http(s):). The engine never inspects pixels.
    """
    data: Optional[bytes] = None
    mime_type: Optional[str] = None
    uri: Optional[str] = None

    def __post_init__(self):
        if (self.data is None) == (self.uri is None):
            raise ValueError("CTScanImage needs exactly one of data or uri")

    @property
    def is_inline(self) -> bool:
        return self.data is not None or (self.uri or "").startswith("data:")

    def as_url(self) -> str:
        """Return a URL usable by multimodal model APIs (data URI for inline bytes)."""
        if self.uri is not None:
            return self.uri
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.mime_type or 'image/png'};base64,{encoded}"

    def __repr__(self) -> str:
        if self.data is not None:
            return f"CTScanImage(<{len(self.data)} bytes {self.mime_type}>)"
        return f"CTScanImage(uri=<{len(self.uri)} chars>)"


@dataclass(frozen=True)
class PatientAssessment:
    """
    One validated bedside stroke assessment.

    The Siriraj fields (diastolic BP, LOC, vomiting, headache) are only
    guaranteed to be present when no CT scan image was supplied.
    """
    time_since_onset_minutes: float
    arm_weakness: ArmWeakness
    face_droop: bool = False
    speech_slurred: bool = False
    systolic_blood_pressure: Optional[float] = None
    diastolic_blood_pressure: Optional[float] = None
    history_hypertension: bool = False
    history_diabetes: bool = False
    history_smoking: bool = False
    level_of_consciousness: Optional[LevelOfConsciousness] = None
    vomiting: Optional[bool] = None
    headache: Optional[bool] = None
    ct_scan_image: Optional[CTScanImage] = None

    @property
    def has_image(self) -> bool:
        return self.ct_scan_image is not None

    @property
    def has_atheroma_risk(self) -> bool:
        """Any atheroma marker: hypertension, diabetes or smoking history."""
        return self.history_hypertension or self.history_diabetes or self.history_smoking

    def clinical_context(self) -> Dict[str, Any]:
        """Non-image clinical fields, handed to the image-analysis capability."""
        return {
            "timeSinceOnsetMinutes": self.time_since_onset_minutes,
            "faceDroop": self.face_droop,
            "speechSlurred": self.speech_slurred,
            "armWeakness": self.arm_weakness.value,
            "systolicBloodPressure": self.systolic_blood_pressure,
            "diastolicBloodPressure": self.diastolic_blood_pressure,
            "historyHypertension": self.history_hypertension,
            "historyDiabetes": self.history_diabetes,
            "historySmoking": self.history_smoking,
            "levelOfConsciousness": (
                self.level_of_consciousness.value if self.level_of_consciousness else None
            ),
            "vomiting": self.vomiting,
            "headache": self.headache,
        }


@dataclass(frozen=True)
class DiagnosisResult:
    """Final output of one evaluation. Never mutated after construction."""
    stroke_type: StrokeType
    confidence: float
    thrombolytic_eligible: bool
    method_used: MethodUsed
    recommended_action: str
    action_protocol: str
    agent_name: str
    siriraj_score: Optional[float] = None

    @property
    def confidence_percent(self) -> int:
        return round(self.confidence * 100)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "strokeType": self.stroke_type.value,
            "confidence": self.confidence,
            "confidencePercent": self.confidence_percent,
            "thrombolyticEligible": self.thrombolytic_eligible,
            "methodUsed": self.method_used.value,
            "recommendedAction": self.recommended_action,
            "actionProtocol": self.action_protocol,
            "agentName": self.agent_name,
            "sirirajScore": self.siriraj_score,
        }
