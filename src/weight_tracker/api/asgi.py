"""ASGI entrypoint for the weight tracker API."""

from weight_tracker.api.app import create_app
from weight_tracker.containers import build_container

app = create_app(build_container())
