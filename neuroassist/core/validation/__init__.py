"""
Validation Module

Turns raw intake data into a validated PatientAssessment before any
classification work is done.
"""
from .assessment import (
    ACCEPTED_IMAGE_TYPES,
    MAX_IMAGE_BYTES,
    AssessmentIntake,
    parse_ct_image,
    to_assessment_error,
    validate_assessment,
)

__all__ = [
    "AssessmentIntake",
    "validate_assessment",
    "to_assessment_error",
    "parse_ct_image",
    "MAX_IMAGE_BYTES",
    "ACCEPTED_IMAGE_TYPES",
]
