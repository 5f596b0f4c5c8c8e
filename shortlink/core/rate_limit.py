"""
Rate Limiting Configuration

This module provides rate limiting functionality for API endpoints.
Rate limiting prevents abuse (including brute-force enumeration of short
codes) and ensures fair usage.

Design Decisions:
- Uses slowapi for rate limiting (lightweight, FastAPI-compatible)
- Different limits for different endpoints
- IP-based limiting
- Can be switched off with RATE_LIMIT_ENABLED (tests, trusted deployments)
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from shortlink.core.setting import settings

limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)

# Format: "count/period" (e.g., "10/minute" means 10 requests per minute)
RATE_LIMITS = {
    "shorten": "10/minute",  # Link creation: 10 per minute per IP
    "redirect": "100/minute",  # Redirects: 100 per minute per IP
    "my_links": "30/minute",  # Owner link management: 30 per minute per IP
}
