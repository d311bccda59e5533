"""
Middleware package for the Estate Dashboard API.
Provides request tracking and performance monitoring.
"""

from .request_context import RequestContextMiddleware
from .performance import PerformanceMonitoringMiddleware

__all__ = [
    "RequestContextMiddleware",
    "PerformanceMonitoringMiddleware"
]
