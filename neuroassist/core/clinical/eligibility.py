"""
Thrombolytic Eligibility

Eligible iff the verdict is ischemic and onset is inside the 4.5 h window.
Blood pressure and history are addressed in the protocol text, not here.
"""
from __future__ import annotations

from .base import StrokeType

TPA_WINDOW_MINUTES = 270   # 4.5 h after symptom onset, exclusive


def is_thrombolytic_eligible(stroke_type: StrokeType, time_since_onset_minutes: float) -> bool:
    return (
        stroke_type == StrokeType.ISCHEMIC
        and time_since_onset_minutes < TPA_WINDOW_MINUTES
    )
