"""
Third-party API integrations.
"""

from integrations.amazon_sp_api import (
    AmazonSpApiClient,
    SpApiSession,
    SpApiRequest,
    RateLimiter,
    get_sp_api_client,
)

__all__ = [
    "AmazonSpApiClient",
    "SpApiSession",
    "SpApiRequest",
    "RateLimiter",
    "get_sp_api_client",
]
