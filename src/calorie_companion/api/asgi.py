"""ASGI entrypoint for the calorie companion API."""

from calorie_companion.api.app import create_app
from calorie_companion.containers import build_container

app = create_app(build_container())
