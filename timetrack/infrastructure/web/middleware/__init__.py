"""
HTTP middleware and exception handlers.
"""

from .error_handler import ErrorHandlerMiddleware, domain_exception_handler, format_domain_error

__all__ = ["ErrorHandlerMiddleware", "domain_exception_handler", "format_domain_error"]
