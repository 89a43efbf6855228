"""ASGI entrypoint for the Munchboxd app."""

from munchboxd.api.app import create_app
from munchboxd.containers import build_container

app = create_app(build_container())
