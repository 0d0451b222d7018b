"""
Utility modules shared across the codebase.
"""

from .retry import retry_operation, RetryResult, get_http_status

__all__ = ['retry_operation', 'RetryResult', 'get_http_status']
