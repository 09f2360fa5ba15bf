# networkcontrol/api/__init__.py
"""Network Control HTTP surface"""

from .app import create_app, error_status
from .middleware import RequestIdMiddleware, get_request_id

__all__ = ["create_app", "error_status", "RequestIdMiddleware", "get_request_id"]
