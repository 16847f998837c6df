"""
Action Protocols

The four reviewed protocol texts shown to front-line staff, and the
thrombolytic agent regimes that parameterise the one text that needs them.

The texts are data, not logic: each is a module-level constant, selected
only by (stroke_type, eligible). The ischemic-eligible text is the single
place where configured agent values are substituted. No patient value is
ever interpolated.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Dict, Optional

from neuroassist.utils import ConfigurationError
from .base import StrokeType

CONFIG_SCHEMA_VERSION = 1


# ── Agent regimes ────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ThrombolyticAgentConfig:
    """
    Dosing regime for the configured thrombolytic agent.

    schema_version is bumped whenever a field is added so stale deployments
    fail loudly instead of rendering a half-filled protocol.
    """
    name: str
    dose_mg_per_kg: float
    max_dose_mg: float
    bolus_percentage: float
    schema_version: int = CONFIG_SCHEMA_VERSION

    @property
    def infusion_percentage(self) -> float:
        return 100 - self.bolus_percentage

    def validate(self) -> "ThrombolyticAgentConfig":
        """Raise ConfigurationError if the regime is inconsistent; return self otherwise."""
        if self.schema_version != CONFIG_SCHEMA_VERSION:
            raise ConfigurationError(
                f"Unsupported agent config schema version {self.schema_version}",
                setting="schema_version",
                details={"expected": CONFIG_SCHEMA_VERSION},
            )
        if not isinstance(self.name, str) or not self.name.strip():
            raise ConfigurationError("Agent name must be a non-empty string", setting="name")

        for setting in ("dose_mg_per_kg", "max_dose_mg", "bolus_percentage"):
            value = getattr(self, setting)
            if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
                raise ConfigurationError(
                    f"{setting} must be a finite number, got {value!r}", setting=setting
                )
            if value <= 0:
                raise ConfigurationError(
                    f"{setting} must be positive, got {value!r}", setting=setting
                )

        if self.bolus_percentage > 100:
            raise ConfigurationError(
                f"bolus_percentage cannot exceed 100, got {self.bolus_percentage!r}",
                setting="bolus_percentage",
            )
        return self

    def to_dict(self) -> dict:
        return {
            "agentName": self.name,
            "doseMgPerKg": self.dose_mg_per_kg,
            "maxDoseMg": self.max_dose_mg,
            "bolusPercentage": self.bolus_percentage,
            "schemaVersion": self.schema_version,
        }


TENECTEPLASE = ThrombolyticAgentConfig(
    name="Tenecteplase",
    dose_mg_per_kg=0.25,
    max_dose_mg=25,
    bolus_percentage=100,
)

ALTEPLASE = ThrombolyticAgentConfig(
    name="Alteplase (tPA)",
    dose_mg_per_kg=0.9,
    max_dose_mg=90,
    bolus_percentage=10,
)

AGENT_REGIMES: Dict[str, ThrombolyticAgentConfig] = {
    "tenecteplase": TENECTEPLASE,
    "alteplase": ALTEPLASE,
}


def resolve_agent(
    name: str,
    dose_mg_per_kg: Optional[float] = None,
    max_dose_mg: Optional[float] = None,
    bolus_percentage: Optional[float] = None,
) -> ThrombolyticAgentConfig:
    """
    Look up a built-in regime by key and apply any dosing overrides.

    Raises:
        ConfigurationError: unknown regime or an inconsistent result.
    """
    key = (name or "").strip().lower()
    regime = AGENT_REGIMES.get(key)
    if regime is None:
        raise ConfigurationError(
            f"Unknown thrombolytic agent '{name}'",
            setting="thrombolytic_agent",
            details={"known_agents": sorted(AGENT_REGIMES)},
        )

    overrides = {
        k: v for k, v in (
            ("dose_mg_per_kg", dose_mg_per_kg),
            ("max_dose_mg", max_dose_mg),
            ("bolus_percentage", bolus_percentage),
        )
        if v is not None
    }
    if overrides:
        regime = replace(regime, **overrides)
    return regime.validate()


# ── Protocol texts ───────────────────────────────────────────────────────────

HEMORRHAGIC_PROTOCOL = (
    "HEMORRHAGIC STROKE SUSPECTED: THROMBOLYSIS CONTRAINDICATED\n"
    "\n"
    "Do NOT administer any thrombolytic or anticoagulant therapy. Stop any "
    "antiplatelet or anticoagulant medication the patient is currently receiving.\n"
    "\n"
    "Refer urgently to neurosurgery and arrange immediate transfer to a centre "
    "with neurosurgical capability. Confirm the diagnosis with a non-contrast CT "
    "of the head if not already done.\n"
    "\n"
    "Control blood pressure to a systolic target of 140 mmHg, avoiding a fall of "
    "more than 70 mmHg within the first hour. Check the coagulation profile (INR, "
    "aPTT, platelets) and reverse any anticoagulation without delay.\n"
    "\n"
    "Protect the airway, elevate the head of the bed to 30 degrees and reassess "
    "neurological status (GCS, pupils) every 15 minutes."
)

ISCHEMIC_ELIGIBLE_PROTOCOL_TEMPLATE = (
    "ISCHEMIC STROKE WITHIN THE THROMBOLYSIS WINDOW: GIVE THROMBOLYTIC THERAPY\n"
    "\n"
    "Confirm there are no contraindications to thrombolysis: intracranial "
    "haemorrhage on imaging, recent major surgery or trauma, active bleeding, or "
    "anticoagulant use with an elevated INR.\n"
    "\n"
    "Blood pressure must be below 185/110 mmHg before treatment and kept below "
    "180/105 mmHg for 24 hours afterwards.\n"
    "\n"
    "Administer {agent_name} {dose_mg_per_kg:g} mg/kg IV (maximum dose "
    "{max_dose_mg:g} mg). Give {bolus_percentage:g}% of the total dose as an "
    "initial IV bolus; infuse any remaining dose ({infusion_percentage:g}%) over "
    "60 minutes.\n"
    "\n"
    "Admit to a stroke unit. Monitor neurological status and blood pressure every "
    "15 minutes during treatment and for 2 hours afterwards. Withhold antiplatelet "
    "and anticoagulant therapy for 24 hours and repeat brain imaging before "
    "starting them."
)

ISCHEMIC_INELIGIBLE_PROTOCOL = (
    "ISCHEMIC STROKE OUTSIDE THE THROMBOLYSIS WINDOW: NO THROMBOLYSIS\n"
    "\n"
    "Thrombolytic therapy is not indicated. Do not administer a thrombolytic agent.\n"
    "\n"
    "Start antiplatelet therapy with aspirin 160 to 325 mg within 24 to 48 hours "
    "of onset, once intracranial haemorrhage has been excluded and swallowing has "
    "been assessed.\n"
    "\n"
    "Assess for mechanical thrombectomy (large vessel occlusion on CT angiography) "
    "and refer urgently to a thrombectomy-capable centre if indicated.\n"
    "\n"
    "Provide supportive care: keep oxygen saturation above 94%, treat fever and "
    "hyperglycaemia, permit blood pressure up to 220/120 mmHg unless another "
    "condition requires lowering it, and admit to a stroke unit."
)

UNCERTAIN_PROTOCOL = (
    "STROKE TYPE UNCERTAIN: STABILIZE AND INVESTIGATE\n"
    "\n"
    "Do not administer thrombolytic, antiplatelet or anticoagulant therapy until "
    "haemorrhage has been excluded.\n"
    "\n"
    "Obtain urgent non-contrast CT or MRI of the brain to establish the stroke type.\n"
    "\n"
    "Stabilize the patient: secure airway, breathing and circulation, check "
    "capillary blood glucose, and monitor blood pressure and neurological status "
    "every 15 minutes.\n"
    "\n"
    "Reassess in 30 minutes or as soon as imaging is available, and consult the "
    "stroke team."
)


# ── Recommended actions ──────────────────────────────────────────────────────
# Short labels shown above the protocol; keyed like the protocol texts.

GIVE_THROMBOLYSIS_ACTION = "Give tPA"
REFER_NO_THROMBOLYSIS_ACTION = "Refer urgently, no tPA"
MONITOR_ACTION = "Monitor and reassess in 30 mins"


def select_recommended_action(stroke_type: StrokeType, eligible: bool) -> str:
    """
    Select the short action label for a verdict.

    Raises:
        ValueError: eligible=True for a non-ischemic stroke type.
    """
    if eligible and stroke_type != StrokeType.ISCHEMIC:
        raise ValueError(f"{stroke_type.value} stroke cannot be thrombolytic-eligible")

    if stroke_type == StrokeType.HEMORRHAGIC:
        return REFER_NO_THROMBOLYSIS_ACTION
    if eligible:
        return GIVE_THROMBOLYSIS_ACTION
    return MONITOR_ACTION


def render_eligible_protocol(agent: ThrombolyticAgentConfig) -> str:
    return ISCHEMIC_ELIGIBLE_PROTOCOL_TEMPLATE.format(
        agent_name=agent.name,
        dose_mg_per_kg=agent.dose_mg_per_kg,
        max_dose_mg=agent.max_dose_mg,
        bolus_percentage=agent.bolus_percentage,
        infusion_percentage=agent.infusion_percentage,
    )


def select_protocol(
    stroke_type: StrokeType,
    eligible: bool,
    agent: ThrombolyticAgentConfig,
) -> str:
    """
    Select the canonical protocol text for a verdict.

    Raises:
        ConfigurationError: the agent regime is inconsistent.
        ValueError: eligible=True for a non-ischemic stroke type.
    """
    agent.validate()

    if eligible and stroke_type != StrokeType.ISCHEMIC:
        raise ValueError(f"{stroke_type.value} stroke cannot be thrombolytic-eligible")

    if stroke_type == StrokeType.HEMORRHAGIC:
        return HEMORRHAGIC_PROTOCOL
    if stroke_type == StrokeType.ISCHEMIC:
        return render_eligible_protocol(agent) if eligible else ISCHEMIC_INELIGIBLE_PROTOCOL
    if stroke_type == StrokeType.UNCERTAIN:
        return UNCERTAIN_PROTOCOL
    raise ValueError(f"Unknown stroke type {stroke_type!r}")
