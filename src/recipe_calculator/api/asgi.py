"""ASGI entrypoint for the recipe calculator API."""

from recipe_calculator.api.app import create_app
from recipe_calculator.containers import build_container

app = create_app(build_container())
