"""
Minimal me-api client: resilient JSON fetches plus plain-text rendering.
"""

from .api import ClientError, ProfileClient, ServerError
from .retry import RetryPolicy

__all__ = ["ClientError", "ProfileClient", "RetryPolicy", "ServerError"]
