"""ASGI entrypoint for the fruit catalog API."""

from fruit_catalog.api.app import create_app
from fruit_catalog.containers import build_container

app = create_app(build_container())
