"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from plate_check.adapters.openai_model_client import OpenAIModelClient
from plate_check.adapters.relay_http_client import HttpxRelayClient
from plate_check.config import Settings
from plate_check.services.images import normalize_image
from plate_check.services.relay import AnalysisRelay
from plate_check.services.sessions import PlateSession


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    relay: AnalysisRelay
    close_resources: Callable[[], Awaitable[None]]


@dataclass
class ClientContainer:
    """Holds the session-side dependencies talking to the relay endpoint."""

    settings: Settings
    relay_client: HttpxRelayClient
    session: PlateSession

    def select_photo(self, raw: bytes) -> None:
        """Normalize a captured or uploaded photo and select it."""
        self.session.select(
            normalize_image(
                raw,
                max_dimension=self.settings.image_max_dimension,
                quality=self.settings.image_jpeg_quality,
            )
        )

    async def close_resources(self) -> None:
        await self.relay_client.close()


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    model_client = (
        OpenAIModelClient.create(resolved_settings.openai_api_key)
        if resolved_settings.has_model_credentials
        else None
    )
    relay = AnalysisRelay(
        client=model_client,
        model=resolved_settings.openai_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        max_output_tokens=resolved_settings.openai_max_output_tokens,
        store=resolved_settings.openai_store,
    )

    async def close_resources() -> None:
        if model_client is not None:
            await model_client.close()

    return AppContainer(
        settings=resolved_settings,
        relay=relay,
        close_resources=close_resources,
    )


def build_client_container(settings: Settings | None = None) -> ClientContainer:
    """Create a session wired to the relay endpoint over HTTP."""
    resolved_settings = settings or Settings()
    relay_client = HttpxRelayClient.create(
        resolved_settings.relay_base_url,
        timeout=resolved_settings.relay_timeout_seconds,
    )
    return ClientContainer(
        settings=resolved_settings,
        relay_client=relay_client,
        session=PlateSession(relay=relay_client),
    )
