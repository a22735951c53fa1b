"""REST API layer for podscope.

Exposes:
    create_app -- FastAPI application factory.
"""

from podscope.api.app import create_app

__all__ = ["create_app"]
