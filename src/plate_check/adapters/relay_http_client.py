"""HTTP client for the analyze-plate relay endpoint."""

from dataclasses import dataclass

import httpx

from plate_check.domain.analysis import AnalysisOutcome, parse_outcome
from plate_check.domain.errors import RelayTransportError
from plate_check.domain.images import EncodedImage
from plate_check.services.sessions import RelayClient

ANALYZE_PATH = "/api/analyze-plate"


@dataclass
class HttpxRelayClient(RelayClient):
    """Relay client posting to the analyze-plate endpoint with httpx."""

    base_url: str
    http_client: httpx.AsyncClient
    timeout: float | None = None

    @classmethod
    def create(cls, base_url: str, timeout: float | None = None) -> "HttpxRelayClient":
        """Create a relay client with a managed httpx session."""
        return cls(
            base_url=base_url.rstrip("/"),
            http_client=httpx.AsyncClient(),
            timeout=timeout,
        )

    async def analyze_image(self, image: EncodedImage) -> AnalysisOutcome:
        """Post an encoded photo for analysis."""
        return await self._post(
            {"image": image.to_base64(), "mediaType": image.media_type},
            failure_message="Failed to analyze image",
        )

    async def analyze_foods(self, food_items: list[str]) -> AnalysisOutcome:
        """Post an edited food list for re-analysis."""
        return await self._post(
            {"foodItems": list(food_items)},
            failure_message="Failed to re-analyze",
        )

    async def _post(
        self, payload: dict[str, object], failure_message: str
    ) -> AnalysisOutcome:
        try:
            response = await self.http_client.post(
                f"{self.base_url}{ANALYZE_PATH}", json=payload, timeout=self.timeout
            )
            response.raise_for_status()
            body = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise RelayTransportError(failure_message) from exc
        return parse_outcome(body)

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
