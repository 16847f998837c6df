"""
NeuroAssist - Stroke Decision Support Engine

Turns a bedside stroke assessment into a stroke-type classification,
confidence, thrombolytic eligibility and a canonical action protocol.
"""

__version__ = "1.0.0"
