"""ASGI entrypoint for the substance engine API."""

from substance_engine.api.app import create_app
from substance_engine.containers import build_container

app = create_app(build_container())
