"""
Utilities Package - Logging and Exception Handling
"""
from .logging import get_logger, setup_logging
from .exceptions import (
    StrokeAssessmentError,
    ValidationError,
    MissingDataError,
    ClassificationUnavailableError,
    ConfigurationError,
    ImageAnalysisError,
)

__all__ = [
    "get_logger",
    "setup_logging",
    "StrokeAssessmentError",
    "ValidationError",
    "MissingDataError",
    "ClassificationUnavailableError",
    "ConfigurationError",
    "ImageAnalysisError",
]
