"""
Middleware package for the application.
"""

from traincycle.middleware.request_context import RequestContextMiddleware

__all__ = ["RequestContextMiddleware"]
