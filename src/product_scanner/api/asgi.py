"""ASGI entrypoint for the product scanner API."""

from product_scanner.api.app import create_app
from product_scanner.containers import build_container

app = create_app(build_container())
