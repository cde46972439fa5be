"""Drop every cached destination analysis.

Run after changing scoring weights or thresholds so stale scores are not
served for the rest of their 48 hour lifetime.
"""

import asyncio
import logging
import sys

from travel_intel.services.cache_service import CacheService

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


async def clear_analysis_cache(cache: CacheService) -> int:
    """Delete cached analyses and return a process exit code."""
    logger.info("Clearing cached destination analyses")

    try:
        if not await cache.is_available():
            logger.error("Redis is disabled or unreachable, nothing cleared")
            return 1

        deleted_count = await cache.invalidate_all_analyses()
        logger.info(f"Cache cleared. Deleted {deleted_count} analyses.")
        return 0

    except Exception as e:
        logger.error(f"Error clearing cache: {str(e)}")
        return 1

    finally:
        await cache.close()


if __name__ == "__main__":
    sys.exit(asyncio.run(clear_analysis_cache(CacheService())))
