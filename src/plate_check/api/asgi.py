"""ASGI entrypoint for the plate check API."""

from plate_check.api.app import create_app
from plate_check.containers import build_container

app = create_app(build_container())
