"""
Custom Exception Hierarchy

Every failure the decision engine can report to its caller, with a stable
error code and structured details so the four kinds stay distinguishable
across the API boundary.
"""
from typing import Optional, Dict, Any, List


class StrokeAssessmentError(Exception):
    """Base exception for all stroke assessment errors."""

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details
        }


class ValidationError(StrokeAssessmentError):
    """Malformed patient data. Fix the input and resubmit."""

    def __init__(
        self,
        message: str,
        field: str = "unknown",
        details: Optional[Dict[str, Any]] = None,
        code: str = "VALIDATION_ERROR"
    ):
        super().__init__(
            message=message,
            code=code,
            details={"field": field, **(details or {})}
        )
        self.field = field


class MissingDataError(ValidationError):
    """Fields required by the Siriraj path are absent and no CT image was supplied."""

    def __init__(
        self,
        missing_fields: List[str],
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=(
                "Missing required data without a CT scan image: "
                + ", ".join(missing_fields)
            ),
            field=missing_fields[0] if missing_fields else "unknown",
            details={"missing_fields": list(missing_fields), **(details or {})},
            code="MISSING_DATA"
        )
        self.missing_fields = list(missing_fields)


class ClassificationUnavailableError(StrokeAssessmentError):
    """The image-analysis capability timed out, failed or is not configured."""

    def __init__(
        self,
        message: str,
        reason: str = "unknown",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="CLASSIFICATION_UNAVAILABLE",
            details={"reason": reason, **(details or {})}
        )
        self.reason = reason


class ConfigurationError(StrokeAssessmentError):
    """Unknown or inconsistent thrombolytic agent configuration."""

    def __init__(
        self,
        message: str,
        setting: str = "unknown",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="CONFIGURATION_ERROR",
            details={"setting": setting, **(details or {})}
        )
        self.setting = setting


class ImageAnalysisError(StrokeAssessmentError):
    """Errors raised inside an image-analysis adapter (API failure, bad reply)."""

    def __init__(
        self,
        message: str,
        model: str = "unknown",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="IMAGE_ANALYSIS_ERROR",
            details={"model": model, **(details or {})}
        )
        self.model = model
