"""Shared test fixtures."""

import io
import json
from dataclasses import dataclass, field

import pytest
from PIL import Image

from plate_check.config import Settings
from plate_check.containers import AppContainer
from plate_check.domain.analysis import AnalysisOutcome, parse_outcome
from plate_check.domain.errors import RelayError
from plate_check.domain.images import EncodedImage
from plate_check.services.relay import AnalysisRelay, ModelClient
from plate_check.services.sessions import RelayClient

SAMPLE_ANALYSIS: dict[str, object] = {
    "foodItems": ["grilled chicken", "broccoli", "brown rice"],
    "macroEstimate": {"protein": 40, "carbs": 35, "fats": 25},
    "pyramidScore": {
        "overall": 82,
        "proteinQuality": "excellent",
        "vegetableScore": "good",
        "grainQuality": "good",
    },
    "feedback": {
        "strengths": ["Lean protein", "Whole grain carbs"],
        "improvements": ["Add a healthy fat like avocado"],
    },
    "kidFriendlyScore": {
        "emoji": "💪",
        "message": "Power plate!",
        "stars": 4,
    },
}


def make_image_bytes(width: int, height: int, image_format: str = "PNG") -> bytes:
    """Render a solid-colour test image."""
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), (200, 120, 40)).save(buffer, format=image_format)
    return buffer.getvalue()


def analysis_payload(**overrides: object) -> dict[str, object]:
    """Return a copy of the sample analysis with top-level overrides."""
    payload = dict(SAMPLE_ANALYSIS)
    payload.update(overrides)
    return payload


@dataclass
class FakeModelClient(ModelClient):
    """Fake model client returning a fixed answer and recording prompts."""

    text: str = ""
    error: Exception | None = None
    calls: list[dict[str, object]] = field(default_factory=list)

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
        self.calls.append(
            {"model": model, "prompt": prompt, "image_data_url": image_data_url}
        )
        if self.error is not None:
            raise self.error
        return self.text


@dataclass
class FakeRelayClient(RelayClient):
    """Fake relay returning queued outcomes or raising queued errors."""

    responses: list[AnalysisOutcome | RelayError] = field(default_factory=list)
    image_calls: list[EncodedImage] = field(default_factory=list)
    food_calls: list[list[str]] = field(default_factory=list)

    def queue(self, payload: dict[str, object] | RelayError) -> None:
        if isinstance(payload, RelayError):
            self.responses.append(payload)
        else:
            self.responses.append(parse_outcome(payload))

    async def analyze_image(self, image: EncodedImage) -> AnalysisOutcome:
        self.image_calls.append(image)
        return self._next()

    async def analyze_foods(self, food_items: list[str]) -> AnalysisOutcome:
        self.food_calls.append(list(food_items))
        return self._next()

    def _next(self) -> AnalysisOutcome:
        response = self.responses.pop(0)
        if isinstance(response, RelayError):
            raise response
        return response


@pytest.fixture
def settings() -> Settings:
    return Settings(openai_api_key="openai-key")


@pytest.fixture
def model_client() -> FakeModelClient:
    return FakeModelClient(text=json.dumps(SAMPLE_ANALYSIS))


@pytest.fixture
def sample_image() -> EncodedImage:
    return EncodedImage(data=b"\xff\xd8\xff-jpeg", media_type="image/jpeg")


@pytest.fixture
def container(settings: Settings, model_client: FakeModelClient) -> AppContainer:
    relay = AnalysisRelay(
        client=model_client,
        model=settings.openai_model,
        reasoning_effort=settings.openai_reasoning_effort,
        max_output_tokens=settings.openai_max_output_tokens,
        store=settings.openai_store,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        relay=relay,
        close_resources=close_resources,
    )
