"""
LLM Image Analysis Module

Gemini-backed implementation of the image-analysis capability.
The engine consumes only its (strokeType, clarityBand) verdict; the model
never sees or produces protocol text, confidence or eligibility.
"""
from .gemini_client import GeminiCTAnalyzer, GeminiConfig, GeminiModel, parse_verdict

__all__ = [
    "GeminiCTAnalyzer",
    "GeminiConfig",
    "GeminiModel",
    "parse_verdict",
]
