"""HTTP and websocket surface."""

from linewatch.web.app import create_app

__all__ = ["create_app"]
