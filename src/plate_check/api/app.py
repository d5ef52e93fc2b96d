"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from plate_check.app_logging import configure_logging
from plate_check.containers import AppContainer
from plate_check.domain.analysis import dump_outcome
from plate_check.domain.errors import RelayError
from plate_check.services.relay import AnalyzePlateRequest


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if not app.state.container.settings.has_model_credentials:
            logger.warning("Model API key is not configured")
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(RequestValidationError)
    async def invalid_body(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Invalid request body"},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/api/analyze-plate")
    async def analyze_plate(
        payload: AnalyzePlateRequest, request: Request
    ) -> JSONResponse:
        """Relay a plate photo or food list to the model."""
        state_container: AppContainer = request.app.state.container
        try:
            outcome = await state_container.relay.handle(payload)
        except RelayError as exc:
            if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
                logger.error("Error analyzing plate: %s", exc.message)
            return JSONResponse(
                status_code=exc.status_code, content={"error": exc.message}
            )
        return JSONResponse(content=dump_outcome(outcome))

    return app
