"""
Assessment Validation Module

Normalises a raw patient-data mapping (wire/camelCase keys, as sent by the
intake form) into a PatientAssessment, or rejects it.

Rules (enforced by the AssessmentIntake pydantic model):
  - numeric fields parse as finite, non-negative numbers (numeric strings
    are coerced; booleans are not numbers)
  - enumerations must match one of their literals exactly
  - flags must be JSON booleans and default to False when omitted
  - None and blank strings count as "not provided" for every field
  - without a CT image the Siriraj fields become mandatory and every
    missing one is reported together in one MissingDataError

pydantic errors are translated into the project's ValidationError /
MissingDataError by to_assessment_error, which the API layer reuses for
request-body errors.
"""
import base64
import binascii
import re
from typing import Annotated, Any, Dict, Mapping, Optional, Sequence

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    PlainValidator,
    StrictBool,
    WithJsonSchema,
    model_validator,
)
from pydantic import ValidationError as PydanticValidationError
from pydantic_core import PydanticCustomError

from neuroassist.core.clinical.base import (
    ArmWeakness,
    CTScanImage,
    LevelOfConsciousness,
    PatientAssessment,
)
from neuroassist.utils import MissingDataError, ValidationError, get_logger

logger = get_logger(__name__)

MAX_IMAGE_BYTES = 5 * 1024 * 1024   # 5 MB
ACCEPTED_IMAGE_TYPES = ("image/jpeg", "image/jpg", "image/png")

_DATA_URI_RE = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+);base64,(?P<payload>.*)$", re.DOTALL)
_JPEG_MAGIC = b"\xff\xd8\xff"
_PNG_MAGIC = b"\x89PNG\r\n\x1a\n"

# Older intake forms used these names; the current name wins when both are given.
LEGACY_FIELD_NAMES: Dict[str, str] = {
    "timeSinceOnset": "timeSinceOnsetMinutes",
    "bloodPressure": "systolicBloodPressure",
}

SIRIRAJ_FIELDS = ("diastolicBloodPressure", "levelOfConsciousness", "vomiting", "headache")

_ENUM_FIELDS = {
    "armWeakness": ArmWeakness,
    "levelOfConsciousness": LevelOfConsciousness,
}

_REQUIRED_MESSAGES = {
    "armWeakness": "You need to select an arm weakness option.",
}


# ── CT image ─────────────────────────────────────────────────────────────────

def _sniff_mime(data: bytes) -> Optional[str]:
    if data.startswith(_JPEG_MAGIC):
        return "image/jpeg"
    if data.startswith(_PNG_MAGIC):
        return "image/png"
    return None


def _check_inline_image(data: bytes, mime_type: Optional[str]) -> None:
    if mime_type not in ACCEPTED_IMAGE_TYPES:
        raise ValidationError(
            "Only .jpg, .jpeg, and .png formats are supported.",
            field="ctScanImage",
            details={"mime_type": mime_type},
        )
    if len(data) > MAX_IMAGE_BYTES:
        raise ValidationError(
            "Max image size is 5MB.",
            field="ctScanImage",
            details={"size_bytes": len(data)},
        )
    if not data:
        raise ValidationError("CT scan image is empty", field="ctScanImage")


def parse_ct_image(value: Any) -> CTScanImage:
    """
    Accept raw bytes, a base64 data URI, an http(s) URI or a CTScanImage.

    Raises:
        ValidationError: unsupported format, oversized or undecodable image.
    """
    if isinstance(value, CTScanImage):
        return value

    if isinstance(value, (bytes, bytearray)):
        data = bytes(value)
        mime_type = _sniff_mime(data)
        _check_inline_image(data, mime_type)
        return CTScanImage(data=data, mime_type=mime_type)

    if isinstance(value, str):
        uri = value.strip()
        match = _DATA_URI_RE.match(uri)
        if match:
            try:
                data = base64.b64decode(match.group("payload"), validate=True)
            except (binascii.Error, ValueError):
                raise ValidationError(
                    "CT scan image data URI is not valid base64", field="ctScanImage"
                ) from None
            mime_type = match.group("mime").lower()
            _check_inline_image(data, mime_type)
            if mime_type == "image/jpg":
                mime_type = "image/jpeg"
            return CTScanImage(data=data, mime_type=mime_type)
        if uri.startswith(("http://", "https://")):
            return CTScanImage(uri=uri)

    raise ValidationError(
        "ctScanImage must be image bytes, a base64 data URI or an http(s) URI",
        field="ctScanImage",
    )


# ── Intake model ─────────────────────────────────────────────────────────────

def _is_absent(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def _reject_bool(value: Any) -> Any:
    if isinstance(value, bool):
        raise PydanticCustomError("number_type", "Input should be a number, not a boolean")
    return value


def _coerce_ct_image(value: Any) -> CTScanImage:
    try:
        return parse_ct_image(value)
    except ValidationError as exc:
        raise PydanticCustomError("ct_image", "{reason}", {"reason": exc.message}) from None


Measurement = Annotated[
    float,
    Field(ge=0, allow_inf_nan=False),
    BeforeValidator(_reject_bool),
]

CTImageInput = Annotated[
    CTScanImage,
    PlainValidator(_coerce_ct_image),
    WithJsonSchema({
        "type": "string",
        "description": "Base64 data URI (JPEG/PNG, max 5MB) or http(s) URI",
    }),
]


class AssessmentIntake(BaseModel):
    """Wire form of one bedside assessment, keyed as the intake form sends it."""
    model_config = ConfigDict(extra="ignore")

    timeSinceOnsetMinutes: Measurement = Field(description="Minutes since symptom onset")
    armWeakness: ArmWeakness = Field(description="None, Left, Right or Both")
    faceDroop: StrictBool = False
    speechSlurred: StrictBool = False
    systolicBloodPressure: Optional[Measurement] = None
    diastolicBloodPressure: Optional[Measurement] = Field(
        default=None, description="Required when no CT scan image is supplied"
    )
    historyHypertension: StrictBool = False
    historyDiabetes: StrictBool = False
    historySmoking: StrictBool = False
    levelOfConsciousness: Optional[LevelOfConsciousness] = Field(
        default=None, description="Conscious, Drowsy or Comatose"
    )
    vomiting: Optional[StrictBool] = None
    headache: Optional[StrictBool] = None
    ctScanImage: Optional[CTImageInput] = None

    @model_validator(mode="before")
    @classmethod
    def _drop_absent_values(cls, data: Any) -> Any:
        """Treat None/blank values as omitted and fold legacy keys into current ones."""
        if not isinstance(data, Mapping):
            return data
        cleaned = {key: value for key, value in data.items() if not _is_absent(value)}
        for legacy, current in LEGACY_FIELD_NAMES.items():
            if legacy in cleaned:
                cleaned.setdefault(current, cleaned.pop(legacy))
        return cleaned

    @model_validator(mode="after")
    def _require_siriraj_fields_without_image(self) -> "AssessmentIntake":
        if self.ctScanImage is None:
            missing = [name for name in SIRIRAJ_FIELDS if getattr(self, name) is None]
            if missing:
                raise PydanticCustomError(
                    "missing_data",
                    "Missing required data without a CT scan image: {fields}",
                    {"missing_fields": missing, "fields": ", ".join(missing)},
                )
        return self

    def to_assessment(self) -> PatientAssessment:
        return PatientAssessment(
            time_since_onset_minutes=self.timeSinceOnsetMinutes,
            arm_weakness=self.armWeakness,
            face_droop=self.faceDroop,
            speech_slurred=self.speechSlurred,
            systolic_blood_pressure=self.systolicBloodPressure,
            diastolic_blood_pressure=self.diastolicBloodPressure,
            history_hypertension=self.historyHypertension,
            history_diabetes=self.historyDiabetes,
            history_smoking=self.historySmoking,
            level_of_consciousness=self.levelOfConsciousness,
            vomiting=bool(self.vomiting),
            headache=bool(self.headache),
            ct_scan_image=self.ctScanImage,
        )


# ── Public API ───────────────────────────────────────────────────────────────

def _field_of(error: Mapping[str, Any]) -> str:
    loc = [part for part in error.get("loc", ()) if part != "body"]
    field = str(loc[0]) if loc else "assessment"
    return LEGACY_FIELD_NAMES.get(field, field)


def to_assessment_error(errors: Sequence[Mapping[str, Any]]) -> ValidationError:
    """
    Translate pydantic error entries into the project's error types.

    The first entry decides the error; a "body" prefix on the location
    (FastAPI request errors) is ignored.
    """
    first = errors[0]
    if first["type"] == "missing_data":
        return MissingDataError(first["ctx"]["missing_fields"])

    field = _field_of(first)
    if first["type"] == "missing":
        message = _REQUIRED_MESSAGES.get(field, f"{field} is required")
    else:
        message = f"{field}: {first['msg']}"

    details: Dict[str, Any] = {"type": first["type"]}
    if field in _ENUM_FIELDS:
        details["allowed"] = [member.value for member in _ENUM_FIELDS[field]]
    others = sorted({_field_of(err) for err in errors[1:]} - {field})
    if others:
        details["other_fields"] = others
    return ValidationError(message, field=field, details=details)


def validate_assessment(raw: Mapping[str, Any]) -> PatientAssessment:
    """
    Validate and normalise raw patient data.

    Args:
        raw: Mapping keyed by wire names (timeSinceOnsetMinutes, faceDroop, ...)

    Returns:
        An immutable PatientAssessment.

    Raises:
        MissingDataError: no CT image and one or more Siriraj fields absent.
        ValidationError: any other malformed field.
    """
    try:
        intake = AssessmentIntake.model_validate(raw)
    except PydanticValidationError as exc:
        error = to_assessment_error(exc.errors())
        logger.info(f"Assessment rejected: [{error.code}] {error.message}")
        raise error from None
    return intake.to_assessment()
