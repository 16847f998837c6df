"""
Unit Tests for Protocol Selection, Agent Regimes, Calibration and Eligibility

Protocol texts are compared by literal string equality.
"""
from dataclasses import replace

import pytest

from neuroassist.core.clinical import (
    AGENT_REGIMES,
    ALTEPLASE,
    TENECTEPLASE,
    TPA_WINDOW_MINUTES,
    ClarityBand,
    MagnitudeBand,
    MethodUsed,
    StrokeType,
    ThrombolyticAgentConfig,
    calibrate,
    is_thrombolytic_eligible,
    resolve_agent,
    select_protocol,
    select_recommended_action,
)
from neuroassist.utils import ConfigurationError


EXPECTED_HEMORRHAGIC = (
    "HEMORRHAGIC STROKE SUSPECTED: THROMBOLYSIS CONTRAINDICATED\n"
    "\n"
    "Do NOT administer any thrombolytic or anticoagulant therapy. Stop any antiplatelet "
    "or anticoagulant medication the patient is currently receiving.\n"
    "\n"
    "Refer urgently to neurosurgery and arrange immediate transfer to a centre with "
    "neurosurgical capability. Confirm the diagnosis with a non-contrast CT of the head "
    "if not already done.\n"
    "\n"
    "Control blood pressure to a systolic target of 140 mmHg, avoiding a fall of more "
    "than 70 mmHg within the first hour. Check the coagulation profile (INR, aPTT, "
    "platelets) and reverse any anticoagulation without delay.\n"
    "\n"
    "Protect the airway, elevate the head of the bed to 30 degrees and reassess "
    "neurological status (GCS, pupils) every 15 minutes."
)

EXPECTED_ELIGIBLE_TENECTEPLASE = (
    "ISCHEMIC STROKE WITHIN THE THROMBOLYSIS WINDOW: GIVE THROMBOLYTIC THERAPY\n"
    "\n"
    "Confirm there are no contraindications to thrombolysis: intracranial haemorrhage "
    "on imaging, recent major surgery or trauma, active bleeding, or anticoagulant use "
    "with an elevated INR.\n"
    "\n"
    "Blood pressure must be below 185/110 mmHg before treatment and kept below "
    "180/105 mmHg for 24 hours afterwards.\n"
    "\n"
    "Administer Tenecteplase 0.25 mg/kg IV (maximum dose 25 mg). Give 100% of the total "
    "dose as an initial IV bolus; infuse any remaining dose (0%) over 60 minutes.\n"
    "\n"
    "Admit to a stroke unit. Monitor neurological status and blood pressure every 15 "
    "minutes during treatment and for 2 hours afterwards. Withhold antiplatelet and "
    "anticoagulant therapy for 24 hours and repeat brain imaging before starting them."
)

EXPECTED_ELIGIBLE_ALTEPLASE = (
    "ISCHEMIC STROKE WITHIN THE THROMBOLYSIS WINDOW: GIVE THROMBOLYTIC THERAPY\n"
    "\n"
    "Confirm there are no contraindications to thrombolysis: intracranial haemorrhage "
    "on imaging, recent major surgery or trauma, active bleeding, or anticoagulant use "
    "with an elevated INR.\n"
    "\n"
    "Blood pressure must be below 185/110 mmHg before treatment and kept below "
    "180/105 mmHg for 24 hours afterwards.\n"
    "\n"
    "Administer Alteplase (tPA) 0.9 mg/kg IV (maximum dose 90 mg). Give 10% of the total "
    "dose as an initial IV bolus; infuse any remaining dose (90%) over 60 minutes.\n"
    "\n"
    "Admit to a stroke unit. Monitor neurological status and blood pressure every 15 "
    "minutes during treatment and for 2 hours afterwards. Withhold antiplatelet and "
    "anticoagulant therapy for 24 hours and repeat brain imaging before starting them."
)

EXPECTED_INELIGIBLE = (
    "ISCHEMIC STROKE OUTSIDE THE THROMBOLYSIS WINDOW: NO THROMBOLYSIS\n"
    "\n"
    "Thrombolytic therapy is not indicated. Do not administer a thrombolytic agent.\n"
    "\n"
    "Start antiplatelet therapy with aspirin 160 to 325 mg within 24 to 48 hours of "
    "onset, once intracranial haemorrhage has been excluded and swallowing has been "
    "assessed.\n"
    "\n"
    "Assess for mechanical thrombectomy (large vessel occlusion on CT angiography) and "
    "refer urgently to a thrombectomy-capable centre if indicated.\n"
    "\n"
    "Provide supportive care: keep oxygen saturation above 94%, treat fever and "
    "hyperglycaemia, permit blood pressure up to 220/120 mmHg unless another condition "
    "requires lowering it, and admit to a stroke unit."
)

EXPECTED_UNCERTAIN = (
    "STROKE TYPE UNCERTAIN: STABILIZE AND INVESTIGATE\n"
    "\n"
    "Do not administer thrombolytic, antiplatelet or anticoagulant therapy until "
    "haemorrhage has been excluded.\n"
    "\n"
    "Obtain urgent non-contrast CT or MRI of the brain to establish the stroke type.\n"
    "\n"
    "Stabilize the patient: secure airway, breathing and circulation, check capillary "
    "blood glucose, and monitor blood pressure and neurological status every 15 minutes.\n"
    "\n"
    "Reassess in 30 minutes or as soon as imaging is available, and consult the stroke team."
)


class TestSelectProtocol:
    """Tests for the four canonical protocol texts."""

    def test_hemorrhagic(self):
        assert select_protocol(StrokeType.HEMORRHAGIC, False, TENECTEPLASE) == EXPECTED_HEMORRHAGIC

    def test_ischemic_eligible_tenecteplase(self):
        assert select_protocol(StrokeType.ISCHEMIC, True, TENECTEPLASE) == EXPECTED_ELIGIBLE_TENECTEPLASE

    def test_ischemic_eligible_alteplase(self):
        assert select_protocol(StrokeType.ISCHEMIC, True, ALTEPLASE) == EXPECTED_ELIGIBLE_ALTEPLASE

    def test_ischemic_ineligible(self):
        assert select_protocol(StrokeType.ISCHEMIC, False, TENECTEPLASE) == EXPECTED_INELIGIBLE

    def test_uncertain(self):
        assert select_protocol(StrokeType.UNCERTAIN, False, TENECTEPLASE) == EXPECTED_UNCERTAIN

    @pytest.mark.parametrize("stroke_type,eligible", [
        (StrokeType.HEMORRHAGIC, False),
        (StrokeType.ISCHEMIC, False),
        (StrokeType.UNCERTAIN, False),
    ])
    def test_agent_does_not_change_other_texts(self, stroke_type, eligible):
        assert (
            select_protocol(stroke_type, eligible, TENECTEPLASE)
            == select_protocol(stroke_type, eligible, ALTEPLASE)
        )

    def test_repeated_selection_is_identical(self):
        first = select_protocol(StrokeType.ISCHEMIC, True, ALTEPLASE)
        second = select_protocol(StrokeType.ISCHEMIC, True, ALTEPLASE)
        assert first == second

    @pytest.mark.parametrize("stroke_type", [StrokeType.HEMORRHAGIC, StrokeType.UNCERTAIN])
    def test_eligible_non_ischemic_rejected(self, stroke_type):
        with pytest.raises(ValueError):
            select_protocol(stroke_type, True, TENECTEPLASE)

    def test_inconsistent_agent_rejected(self):
        broken = replace(TENECTEPLASE, max_dose_mg=0)
        with pytest.raises(ConfigurationError) as exc:
            select_protocol(StrokeType.UNCERTAIN, False, broken)
        assert exc.value.setting == "max_dose_mg"


class TestAgentRegimes:
    """Tests for ThrombolyticAgentConfig and resolve_agent."""

    def test_builtin_regimes_are_valid(self):
        for regime in AGENT_REGIMES.values():
            assert regime.validate() is regime

    def test_resolve_is_case_insensitive(self):
        assert resolve_agent("  Alteplase ") == ALTEPLASE

    def test_resolve_unknown(self):
        with pytest.raises(ConfigurationError) as exc:
            resolve_agent("streptokinase")
        assert exc.value.code == "CONFIGURATION_ERROR"
        assert exc.value.details["known_agents"] == ["alteplase", "tenecteplase"]

    def test_resolve_with_overrides(self):
        agent = resolve_agent("tenecteplase", dose_mg_per_kg=0.4, max_dose_mg=40)
        assert agent.name == "Tenecteplase"
        assert agent.dose_mg_per_kg == 0.4
        assert agent.max_dose_mg == 40
        assert agent.bolus_percentage == 100

    def test_resolve_rejects_inconsistent_override(self):
        with pytest.raises(ConfigurationError):
            resolve_agent("alteplase", bolus_percentage=150)

    @pytest.mark.parametrize("changes,setting", [
        ({"name": "  "}, "name"),
        ({"dose_mg_per_kg": -0.1}, "dose_mg_per_kg"),
        ({"max_dose_mg": float("nan")}, "max_dose_mg"),
        ({"bolus_percentage": 0}, "bolus_percentage"),
        ({"bolus_percentage": 100.5}, "bolus_percentage"),
        ({"dose_mg_per_kg": True}, "dose_mg_per_kg"),
        ({"schema_version": 2}, "schema_version"),
    ])
    def test_validate_rejects(self, changes, setting):
        with pytest.raises(ConfigurationError) as exc:
            replace(ALTEPLASE, **changes).validate()
        assert exc.value.setting == setting

    def test_infusion_percentage(self):
        assert ALTEPLASE.infusion_percentage == 90
        assert TENECTEPLASE.infusion_percentage == 0

    def test_to_dict(self):
        assert ThrombolyticAgentConfig("X", 1, 50, 20).to_dict() == {
            "agentName": "X",
            "doseMgPerKg": 1,
            "maxDoseMg": 50,
            "bolusPercentage": 20,
            "schemaVersion": 1,
        }


class TestCalibrate:
    """Tests for confidence band midpoints."""

    @pytest.mark.parametrize("method,strength,expected", [
        (MethodUsed.SIRIRAJ_SCORE, MagnitudeBand.STRONG, 0.90),
        (MethodUsed.SIRIRAJ_SCORE, MagnitudeBand.MODERATE, 0.72),
        (MethodUsed.SIRIRAJ_SCORE, MagnitudeBand.WEAK, 0.495),
        (MethodUsed.IMAGE_ANALYSIS, ClarityBand.HIGH, 0.90),
        (MethodUsed.IMAGE_ANALYSIS, ClarityBand.MEDIUM, 0.645),
        (MethodUsed.IMAGE_ANALYSIS, ClarityBand.LOW, 0.25),
    ])
    def test_midpoints(self, method, strength, expected):
        assert calibrate(method, strength) == expected

    def test_image_low_is_below_half(self):
        assert calibrate(MethodUsed.IMAGE_ANALYSIS, ClarityBand.LOW) < 0.5

    def test_mismatched_strength_rejected(self):
        with pytest.raises(TypeError):
            calibrate(MethodUsed.SIRIRAJ_SCORE, ClarityBand.HIGH)
        with pytest.raises(TypeError):
            calibrate(MethodUsed.IMAGE_ANALYSIS, MagnitudeBand.STRONG)


class TestEligibility:
    """Tests for the 270-minute thrombolysis window."""

    def test_window_constant(self):
        assert TPA_WINDOW_MINUTES == 270

    @pytest.mark.parametrize("minutes,expected", [
        (0, True),
        (269, True),
        (269.9, True),
        (270, False),
        (271, False),
    ])
    def test_ischemic_boundary(self, minutes, expected):
        assert is_thrombolytic_eligible(StrokeType.ISCHEMIC, minutes) is expected

    @pytest.mark.parametrize("stroke_type", [StrokeType.HEMORRHAGIC, StrokeType.UNCERTAIN])
    def test_non_ischemic_never_eligible(self, stroke_type):
        assert is_thrombolytic_eligible(stroke_type, 10) is False


class TestRecommendedAction:
    """Tests for the short action labels."""

    @pytest.mark.parametrize("stroke_type,eligible,expected", [
        (StrokeType.ISCHEMIC, True, "Give tPA"),
        (StrokeType.ISCHEMIC, False, "Monitor and reassess in 30 mins"),
        (StrokeType.HEMORRHAGIC, False, "Refer urgently, no tPA"),
        (StrokeType.UNCERTAIN, False, "Monitor and reassess in 30 mins"),
    ])
    def test_labels(self, stroke_type, eligible, expected):
        assert select_recommended_action(stroke_type, eligible) == expected

    @pytest.mark.parametrize("stroke_type", [StrokeType.HEMORRHAGIC, StrokeType.UNCERTAIN])
    def test_eligible_non_ischemic_rejected(self, stroke_type):
        with pytest.raises(ValueError):
            select_recommended_action(stroke_type, True)
