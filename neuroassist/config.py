"""
NeuroAssist — Configuration
===========================
Centralised settings for the thrombolytic regime, the image-analysis
capability and logging. Values come from NEUROASSIST_* environment
variables, with secrets loaded from the project-level .env file.
"""
import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# ── Paths ───────────────────────────────────────────────────────────────
PROJECT_ROOT = Path(__file__).resolve().parent.parent

# ── Load .env ───────────────────────────────────────────────────────────
load_dotenv(PROJECT_ROOT / ".env")


class Settings(BaseSettings):
    """Runtime settings. Every field can be set via NEUROASSIST_<FIELD>."""

    model_config = SettingsConfigDict(env_prefix="NEUROASSIST_", extra="ignore")

    # ── Thrombolytic regime ──────────────────────────────────────────────
    thrombolytic_agent: str = "tenecteplase"   # key into AGENT_REGIMES
    agent_dose_mg_per_kg: Optional[float] = None
    agent_max_dose_mg: Optional[float] = None
    agent_bolus_percentage: Optional[float] = None

    # ── Image analysis ───────────────────────────────────────────────────
    enable_image_analysis: bool = True
    image_timeout_seconds: float = Field(default=30.0, gt=0)
    gemini_model: str = "gemini-2.5-flash"
    gemini_temperature: float = 0.0
    gemini_api_key: Optional[str] = Field(
        default_factory=lambda: os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY")
    )

    # ── Logging ──────────────────────────────────────────────────────────
    log_level: str = "INFO"
    log_file: Optional[str] = None


@lru_cache()
def get_settings() -> Settings:
    return Settings()
