"""ASGI entrypoint for the FinFlow API."""

from finflow.api.app import create_app
from finflow.containers import build_container

app = create_app(build_container())
