"""ASGI entry point: ``uvicorn portal.app_factory:app``."""
from portal.app import create_app

app = create_app()

__all__ = ["app", "create_app"]
