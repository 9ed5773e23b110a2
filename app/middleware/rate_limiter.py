"""Rate limiting for abuse-prone endpoints such as password reset."""
from fastapi import Request, HTTPException, status
from datetime import datetime, timedelta
from collections import defaultdict
import asyncio
import logging


logger = logging.getLogger(__name__)


class RateLimiter:
    """
    Sliding-window, in-memory rate limiter.

    State lives in the process, so limits apply per worker.
    """

    def __init__(self):
        self.requests = defaultdict(list)
        self.lock = asyncio.Lock()

    async def check_rate_limit(
        self,
        key: str,
        max_requests: int = 5,
        window_seconds: int = 300
    ) -> bool:
        """
        Record a request and check it is within the limit.

        Args:
            key: Unique identifier (e.g., route name plus client IP)
            max_requests: Maximum requests allowed in window
            window_seconds: Time window in seconds

        Returns:
            bool: True if within limit

        Raises:
            HTTPException: 429 when the limit is exceeded
        """
        async with self.lock:
            now = datetime.now()
            cutoff = now - timedelta(seconds=window_seconds)

            self.requests[key] = [
                req_time for req_time in self.requests[key]
                if req_time > cutoff
            ]

            if len(self.requests[key]) >= max_requests:
                logger.warning(f"Rate limit exceeded for {key}")
                minutes = max(window_seconds // 60, 1)
                raise HTTPException(
                    status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                    detail=f"Too many requests. Please try again in {minutes} minutes."
                )

            self.requests[key].append(now)
            return True

    def reset(self) -> None:
        """Forget all recorded requests."""
        self.requests.clear()


# Global rate limiter instance
rate_limiter = RateLimiter()


async def get_client_ip(request: Request) -> str:
    """
    Get client IP address from request.

    Handles X-Forwarded-For header for proxied requests.
    """
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"
