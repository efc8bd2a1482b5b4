"""ASGI entry point: ``uvicorn labreserve.asgi:app``."""

from labreserve.main import create_app

app = create_app()
