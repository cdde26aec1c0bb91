"""
sitescore/middleware/rate_limit.py — Sliding-window per-IP limit on analysis requests.
Each analysis costs up to three outbound requests, so only POST /analyze is limited.
Limit configurable via .env RATE_LIMIT_PER_MINUTE.
"""
import time
from collections import deque
from typing import Callable, Deque, Dict, Iterable, Optional
from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from sitescore.config import get_settings

WINDOW = 60
LIMITED_PATHS = frozenset({"/analyze"})


def client_ip(request: Request) -> str:
    fwd = request.headers.get("X-Forwarded-For")
    if fwd:
        return fwd.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


class SlidingWindow:
    """
    Timestamps of recent hits per key; ``hit`` returns seconds to wait, or None.
    Keys idle for a whole window are dropped, at most once per window.
    """

    def __init__(self, window: float = WINDOW):
        self.window = window
        self._hits: Dict[str, Deque[float]] = {}
        self._last_sweep: Optional[float] = None

    def __len__(self) -> int:
        return len(self._hits)

    def _sweep(self, now: float) -> None:
        stale = [k for k, q in self._hits.items() if not q or now - q[-1] > self.window]
        for key in stale:
            del self._hits[key]
        self._last_sweep = now

    def hit(self, key: str, limit: int, now: Optional[float] = None) -> Optional[int]:
        now = time.monotonic() if now is None else now
        if self._last_sweep is None or now - self._last_sweep > self.window:
            self._sweep(now)
        q = self._hits.setdefault(key, deque())
        while q and now - q[0] > self.window:
            q.popleft()
        if len(q) >= limit:
            return int(self.window - (now - q[0])) + 1
        q.append(now)
        return None

    def clear(self):
        self._hits.clear()
        self._last_sweep = None


limiter = SlidingWindow()


class RateLimitMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, paths: Iterable[str] = LIMITED_PATHS, window: SlidingWindow = limiter):
        super().__init__(app)
        self.paths = frozenset(paths)
        self.window = window

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.method == "POST" and request.url.path in self.paths:
            limit = get_settings().rate_limit_per_minute
            retry = self.window.hit(client_ip(request), limit)
            if retry is not None:
                return JSONResponse(
                    status_code=429,
                    content={"detail": f"Rate limit exceeded. Max {limit}/min per IP.", "retry_after_seconds": retry},
                    headers={"Retry-After": str(retry)},
                )
        return await call_next(request)
