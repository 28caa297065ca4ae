"""ASGI entrypoint: ``uvicorn app:app``."""

from storefront.api.main import app

__all__ = ["app"]
