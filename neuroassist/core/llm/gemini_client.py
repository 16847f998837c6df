"""
Gemini CT Analysis Client

Image-analysis capability backed by Google Gemini through LangChain.
Sends the CT scan plus the bedside findings and expects a JSON verdict:

    {"strokeType": "Ischemic" | "Hemorrhagic" | "Uncertain",
     "clarityBand": "high" | "medium" | "low"}

The client never falls back to a canned answer: an unavailable model, an
API failure or an unparsable reply raises ImageAnalysisError, which the
router surfaces as ClassificationUnavailableError.
"""
from dataclasses import dataclass, field
from typing import Dict, Any, Optional
from enum import Enum
import os
import json
import re
from datetime import datetime

from langchain_core.messages import HumanMessage
from langchain_google_genai import ChatGoogleGenerativeAI

from neuroassist.core.clinical.base import ClarityBand, CTScanImage, StrokeType
from neuroassist.core.clinical.router import ImageVerdict
from neuroassist.utils import ImageAnalysisError, get_logger

logger = get_logger(__name__)


class GeminiModel(str, Enum):
    """Multimodal Gemini models suitable for CT reads."""
    FLASH_2_5 = "gemini-2.5-flash"  # Stable standard
    FLASH_2_5_LITE = "gemini-2.5-flash-lite"
    PRO_2_5 = "gemini-2.5-pro"  # High reasoning
    FLASH_2_0 = "gemini-2.0-flash"  # Legacy stable


@dataclass
class GeminiConfig:
    """Configuration for the Gemini CT client."""
    api_key: Optional[str] = field(default_factory=lambda: os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY"))
    model: str = GeminiModel.FLASH_2_5.value
    temperature: float = 0.0  # deterministic reads

    max_output_tokens: int = 512
    request_timeout_seconds: float = 30.0
    max_retries: int = 0  # a failed read surfaces to the caller; no hidden retries


CT_ANALYSIS_PROMPT = (
    "You are an experienced emergency neuroradiologist specializing in stroke diagnosis.\n"
    "Review the attached non-contrast head CT together with the bedside findings below and "
    "classify the stroke as Ischemic, Hemorrhagic, or Uncertain.\n\n"
    "Bedside findings:\n"
    "{context}\n\n"
    "Rules:\n"
    "- Hyperdense intraparenchymal, subarachnoid or intraventricular blood means Hemorrhagic.\n"
    "- Hypodensity, loss of grey-white differentiation or a hyperdense vessel sign without "
    "blood means Ischemic.\n"
    "- If the image is non-diagnostic or findings are absent or equivocal, answer Uncertain.\n"
    "- clarityBand reflects how unambiguous the image findings are: high, medium, or low.\n\n"
    "Respond with ONLY a JSON object, no prose:\n"
    '{{"strokeType": "Ischemic|Hemorrhagic|Uncertain", "clarityBand": "high|medium|low"}}'
)

_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)

# Older prompt versions answered "Likely Ischemic" / "Likely Hemorrhagic".
_STROKE_TYPE_LABELS = {
    "ischemic": StrokeType.ISCHEMIC,
    "likely ischemic": StrokeType.ISCHEMIC,
    "hemorrhagic": StrokeType.HEMORRHAGIC,
    "likely hemorrhagic": StrokeType.HEMORRHAGIC,
    "uncertain": StrokeType.UNCERTAIN,
}


def format_clinical_context(clinical_context: Dict[str, Any]) -> str:
    lines = []
    for key, value in clinical_context.items():
        if value is None:
            value = "not recorded"
        elif isinstance(value, bool):
            value = "Yes" if value else "No"
        lines.append(f"- {key}: {value}")
    return "\n".join(lines)


def response_text(response: Any) -> str:
    """Flatten a LangChain message's content (str or list of parts) to text."""
    content = response.content if hasattr(response, "content") else response
    if isinstance(content, list):
        return "".join(
            part.get("text", "") if isinstance(part, dict) else str(part)
            for part in content
        )
    return str(content)


def parse_verdict(text: str, model: str = "unknown") -> ImageVerdict:
    """
    Parse the model's JSON reply into an ImageVerdict.

    Raises:
        ImageAnalysisError: reply is not JSON or carries unknown labels.
    """
    cleaned = _FENCE_RE.sub("", text.strip())
    try:
        payload = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise ImageAnalysisError(
            "CT analysis reply is not valid JSON",
            model=model,
            details={"reply": text[:200]},
        ) from exc

    if not isinstance(payload, dict):
        raise ImageAnalysisError("CT analysis reply is not a JSON object", model=model)

    stroke_label = str(payload.get("strokeType", "")).strip().lower()
    clarity_label = str(payload.get("clarityBand", "")).strip().lower()

    stroke_type = _STROKE_TYPE_LABELS.get(stroke_label)
    if stroke_type is None:
        raise ImageAnalysisError(
            f"Unknown strokeType '{payload.get('strokeType')}'", model=model
        )
    try:
        clarity = ClarityBand(clarity_label)
    except ValueError:
        raise ImageAnalysisError(
            f"Unknown clarityBand '{payload.get('clarityBand')}'", model=model
        ) from None

    return ImageVerdict(stroke_type=stroke_type, clarity=clarity)


class GeminiCTAnalyzer:
    """
    ImageAnalysisCapability implementation using Gemini vision.

    Holds only the LangChain chat model; safe to share across concurrent
    evaluations.
    """

    def __init__(self, config: Optional[GeminiConfig] = None):
        """
        Initialize the Gemini CT client.

        Args:
            config: Optional configuration, uses defaults if not provided
        """
        self.config = config or GeminiConfig()
        self._llm = None

        if not self.config.api_key:
            logger.warning("No Gemini API key provided - CT image analysis unavailable")
            return

        self._llm = ChatGoogleGenerativeAI(
            model=self.config.model,
            temperature=self.config.temperature,
            max_output_tokens=self.config.max_output_tokens,
            timeout=self.config.request_timeout_seconds,
            max_retries=self.config.max_retries,
            google_api_key=self.config.api_key,
        )
        logger.info(f"Gemini CT analyzer initialized with model: {self.config.model}")

    @property
    def is_available(self) -> bool:
        """Check if Gemini is configured for use."""
        return self._llm is not None

    def build_message(self, image: CTScanImage, clinical_context: Dict[str, Any]) -> HumanMessage:
        prompt = CT_ANALYSIS_PROMPT.format(context=format_clinical_context(clinical_context))
        return HumanMessage(content=[
            {"type": "text", "text": prompt},
            {"type": "image_url", "image_url": image.as_url()},
        ])

    async def analyze_ct(
        self,
        image: CTScanImage,
        clinical_context: Dict[str, Any],
    ) -> ImageVerdict:
        """
        Classify a CT scan.

        Raises:
            ImageAnalysisError: client unavailable, API failure or bad reply.
        """
        if not self.is_available:
            raise ImageAnalysisError(
                "Gemini CT analysis is not configured (missing API key)",
                model=self.config.model,
            )

        start_time = datetime.now()
        try:
            response = await self._llm.ainvoke([self.build_message(image, clinical_context)])
        except Exception as e:
            logger.error(f"Gemini CT analysis failed: {e}")
            raise ImageAnalysisError(
                f"Gemini request failed: {e}", model=self.config.model
            ) from e

        latency = (datetime.now() - start_time).total_seconds() * 1000
        verdict = parse_verdict(response_text(response), model=self.config.model)
        logger.info(
            f"Gemini CT verdict: {verdict.stroke_type.value} "
            f"({verdict.clarity.value} clarity) in {latency:.0f} ms"
        )
        return verdict
