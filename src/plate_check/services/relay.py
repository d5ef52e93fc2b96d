"""Analysis relay forwarding plates to a hosted vision-language model."""

import json
import logging
import re
from dataclasses import dataclass
from typing import Protocol

from pydantic import BaseModel, ConfigDict, Field

from plate_check.domain.analysis import (
    AnalysisError,
    AnalysisOutcome,
    RawAnalysis,
    parse_outcome,
)
from plate_check.domain.errors import (
    BadRequestError,
    ConfigurationError,
    RelayError,
    RelayFailure,
)
from plate_check.domain.images import EncodedImage

_logger = logging.getLogger(__name__)

ANALYSIS_PROMPT = """You are a nutrition expert analyzing food based on the new \
2025-2030 Dietary Guidelines for Americans (the "New Pyramid").

The New Pyramid prioritizes:
1. HIGH-QUALITY PROTEIN & HEALTHY FATS (top priority): Meat, fish, eggs, \
full-fat dairy, olive oil, avocados, nuts
2. VEGETABLES & FRUITS: Colorful, whole, minimally processed
3. WHOLE GRAINS (smallest portion): Oats, brown rice, quinoa - NOT refined carbs

Be flexible when identifying food. Even if the image is slightly blurry, at an \
angle, partially visible, or taken in low light, do your best to identify what \
foods are present. Look for ANY food items - meals, snacks, drinks, \
ingredients. If you can make a reasonable guess about what food is shown, \
provide your analysis.

Respond in this exact JSON format (no markdown, just raw JSON):
{
  "foodItems": ["item1", "item2", "item3"],
  "macroEstimate": {
    "protein": 25,
    "carbs": 45,
    "fats": 30
  },
  "pyramidScore": {
    "overall": 75,
    "proteinQuality": "good",
    "vegetableScore": "needs improvement",
    "grainQuality": "good"
  },
  "feedback": {
    "strengths": ["Good protein source", "Healthy fats present"],
    "improvements": ["Add more colorful vegetables", "Consider whole grain option"]
  },
  "kidFriendlyScore": {
    "emoji": "🌟",
    "message": "Great Protein! Add some greens for superpowers!",
    "stars": 4
  }
}

Be encouraging but honest. The macro percentages should add up to 100. The \
overall score is 0-100. Stars are 1-5. Only respond with the JSON object, no \
other text."""

IMAGE_INSTRUCTION = (
    "Analyze this plate image. If the image doesn't show food, respond with: "
    '{"error": "Please upload a photo of food"}'
)

REFUSAL_MESSAGE = (
    "Couldn't identify food in this image. Please try a clearer photo of your meal."
)

_REFUSAL_PHRASES = ("can't", "cannot", "unable", "don't see")
_FENCED_BLOCK = re.compile(r"```(?:json)?[ \t]*\n?(.*?)\n?[ \t]*```", re.DOTALL)
_OBJECT_START = re.compile(r"\{")
_DECODER = json.JSONDecoder()


class ModelClient(Protocol):
    """Interface for the hosted vision-language model."""

    async def complete(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        max_output_tokens: int,
        store: bool,
        prompt: str,
        image_data_url: str | None = None,
    ) -> str:
        """Return the model's text answer to a prompt and optional image."""


class AnalyzePlateRequest(BaseModel):
    """Body of the analyze-plate endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    image: str | None = None
    media_type: str | None = Field(default=None, alias="mediaType")
    food_items: list[str] | None = Field(default=None, alias="foodItems")


@dataclass
class AnalysisRelay:
    """Stateless relay between plate requests and the model.

    ``client`` is ``None`` when no upstream credential is configured; every
    request then fails with a configuration error.
    """

    client: ModelClient | None
    model: str
    reasoning_effort: str | None = None
    max_output_tokens: int = 4096
    store: bool = False

    async def handle(self, request: AnalyzePlateRequest) -> AnalysisOutcome:
        """Dispatch an endpoint request to the matching analysis."""
        self._require_client()
        if request.food_items:
            return await self.analyze_foods(request.food_items)
        if request.image:
            try:
                image = EncodedImage.from_base64(
                    request.image, request.media_type or "image/jpeg"
                )
            except ValueError as exc:
                raise BadRequestError("Invalid image data") from exc
            return await self.analyze_image(image)
        raise BadRequestError("No image or food items provided")

    async def analyze_image(self, image: EncodedImage) -> AnalysisOutcome:
        """Analyze a plate photo."""
        _logger.info(
            "Processing image: %sKB, type: %s", image.size_kb, image.media_type
        )
        prompt = f"{ANALYSIS_PROMPT}\n\n{IMAGE_INSTRUCTION}"
        return await self._complete(prompt, image_data_url=image.to_data_url())

    async def analyze_foods(self, food_items: list[str]) -> AnalysisOutcome:
        """Re-score a plate from its list of foods."""
        if not food_items:
            raise BadRequestError("No image or food items provided")
        prompt = (
            f"{ANALYSIS_PROMPT}\n\n"
            f"Analyze this list of foods on a plate: {', '.join(food_items)}\n\n"
            "Keep the foodItems array exactly as provided. "
            "Estimate macros, score, and feedback based on these foods."
        )
        return await self._complete(prompt)

    async def _complete(
        self, prompt: str, image_data_url: str | None = None
    ) -> AnalysisOutcome:
        client = self._require_client()
        try:
            text = await client.complete(
                model=self.model,
                reasoning_effort=self.reasoning_effort,
                max_output_tokens=self.max_output_tokens,
                store=self.store,
                prompt=prompt,
                image_data_url=image_data_url,
            )
        except RelayError:
            raise
        except Exception as exc:
            _logger.exception("Model request failed")
            raise RelayFailure(f"Failed to analyze image: {exc}") from exc
        return parse_model_text(text)

    def _require_client(self) -> ModelClient:
        if self.client is None:
            raise ConfigurationError("API key not configured")
        return self.client


def parse_model_text(text: str) -> AnalysisOutcome:
    """Interpret the model's free-text answer.

    A fenced code block is unwrapped first, otherwise the first complete JSON
    object in the text is used and anything after it is ignored. Unparseable
    text becomes a refusal error when it reads like one and an unstructured
    payload otherwise.
    """
    try:
        payload = _extract_json(text)
    except json.JSONDecodeError:
        if _looks_like_refusal(text):
            return AnalysisError(error=REFUSAL_MESSAGE)
        return RawAnalysis(raw_response=text)
    outcome = parse_outcome(payload)
    if isinstance(outcome, RawAnalysis):
        return RawAnalysis(raw_response=text)
    return outcome


def _extract_json(text: str) -> object:
    fenced = _FENCED_BLOCK.search(text)
    if fenced:
        try:
            return json.loads(fenced.group(1))
        except json.JSONDecodeError:
            _logger.debug("Fenced block is not JSON, scanning the full text")
    for brace in _OBJECT_START.finditer(text):
        try:
            payload, _ = _DECODER.raw_decode(text, brace.start())
        except json.JSONDecodeError:
            continue
        return payload
    return json.loads(text)


def _looks_like_refusal(text: str) -> bool:
    lowered = text.lower().replace("’", "'")  # noqa: RUF001
    return any(phrase in lowered for phrase in _REFUSAL_PHRASES)
