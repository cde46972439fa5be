"""Rate limiting configuration."""

from slowapi import Limiter
from slowapi.util import get_remote_address

from travel_intel.config import get_settings

settings = get_settings()

limiter = Limiter(
    key_func=get_remote_address,
    enabled=settings.RATE_LIMIT_ENABLED,
)


def rate_limit_analysis():
    """Rate limit for destination and route analysis endpoints.

    Each analysis fans out to several provider calls, so these share
    the configured per-minute budget.
    """
    return f"{settings.RATE_LIMIT_PER_MINUTE}/minute"


def rate_limit_conditions():
    """Rate limit for raw weather and surface lookups."""
    return f"{settings.RATE_LIMIT_PER_MINUTE * 2}/minute"
