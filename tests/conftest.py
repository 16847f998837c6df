"""
Pytest Configuration and Fixtures

Shared fixtures for stroke decision engine tests.
"""
import asyncio
import base64
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from neuroassist.core.clinical import (
    ArmWeakness,
    ClarityBand,
    CTScanImage,
    ImageVerdict,
    LevelOfConsciousness,
    PatientAssessment,
    StrokeDecisionEngine,
    StrokeType,
    TENECTEPLASE,
)

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64
PNG_DATA_URI = "data:image/png;base64," + base64.b64encode(PNG_BYTES).decode("ascii")


class FakeImageCapability:
    """Deterministic image-analysis capability returning a canned verdict."""

    def __init__(self, stroke_type: StrokeType = StrokeType.ISCHEMIC,
                 clarity: ClarityBand = ClarityBand.HIGH):
        self.verdict = ImageVerdict(stroke_type=stroke_type, clarity=clarity)
        self.calls: List[Dict[str, Any]] = []

    async def analyze_ct(self, image: CTScanImage, clinical_context: Dict[str, Any]) -> ImageVerdict:
        self.calls.append({"image": image, "clinical_context": clinical_context})
        return self.verdict


class SlowImageCapability:
    """Never answers within any reasonable timeout."""

    def __init__(self, delay_seconds: float = 5.0):
        self.delay_seconds = delay_seconds

    async def analyze_ct(self, image, clinical_context):
        await asyncio.sleep(self.delay_seconds)
        return ImageVerdict(stroke_type=StrokeType.ISCHEMIC, clarity=ClarityBand.HIGH)


class FailingImageCapability:
    """Raises on every call, like an upstream API outage."""

    async def analyze_ct(self, image, clinical_context):
        raise ConnectionError("upstream unavailable")


@pytest.fixture
def siriraj_raw() -> Dict[str, Any]:
    """Raw intake for a conscious hypertensive patient, DBP 80 (score -7.0)."""
    return {
        "timeSinceOnsetMinutes": 120,
        "faceDroop": True,
        "speechSlurred": True,
        "armWeakness": "Left",
        "systolicBloodPressure": 150,
        "diastolicBloodPressure": 80,
        "historyHypertension": True,
        "historyDiabetes": False,
        "historySmoking": False,
        "levelOfConsciousness": "Conscious",
        "vomiting": False,
        "headache": False,
    }


@pytest.fixture
def image_raw() -> Dict[str, Any]:
    """Raw intake with a CT image and no Siriraj fields."""
    return {
        "timeSinceOnsetMinutes": 90,
        "faceDroop": True,
        "armWeakness": "Right",
        "ctScanImage": PNG_DATA_URI,
    }


@pytest.fixture
def make_assessment():
    """Factory for PatientAssessment with Siriraj-path defaults."""
    def _make(
        time_since_onset_minutes: float = 60,
        level_of_consciousness: Optional[LevelOfConsciousness] = LevelOfConsciousness.CONSCIOUS,
        vomiting: Optional[bool] = False,
        headache: Optional[bool] = False,
        diastolic_blood_pressure: Optional[float] = 80,
        history_hypertension: bool = False,
        history_diabetes: bool = False,
        history_smoking: bool = False,
        ct_scan_image: Optional[CTScanImage] = None,
    ) -> PatientAssessment:
        return PatientAssessment(
            time_since_onset_minutes=time_since_onset_minutes,
            arm_weakness=ArmWeakness.LEFT,
            face_droop=True,
            speech_slurred=False,
            diastolic_blood_pressure=diastolic_blood_pressure,
            history_hypertension=history_hypertension,
            history_diabetes=history_diabetes,
            history_smoking=history_smoking,
            level_of_consciousness=level_of_consciousness,
            vomiting=vomiting,
            headache=headache,
            ct_scan_image=ct_scan_image,
        )
    return _make


@pytest.fixture
def ct_image() -> CTScanImage:
    return CTScanImage(data=PNG_BYTES, mime_type="image/png")


@pytest.fixture
def engine() -> StrokeDecisionEngine:
    """Engine without an image capability (Siriraj path only)."""
    return StrokeDecisionEngine(agent=TENECTEPLASE)


@pytest.fixture
def png_bytes() -> bytes:
    return PNG_BYTES


@pytest.fixture
def png_data_uri() -> str:
    return PNG_DATA_URI


@pytest.fixture
def fake_capability():
    """Factory: fake_capability(StrokeType.HEMORRHAGIC, ClarityBand.MEDIUM)."""
    return FakeImageCapability


@pytest.fixture
def slow_capability() -> SlowImageCapability:
    return SlowImageCapability()


@pytest.fixture
def failing_capability() -> FailingImageCapability:
    return FailingImageCapability()
