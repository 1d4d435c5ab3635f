import time
import logging
from starlette.middleware.base import BaseHTTPMiddleware


class MetricsMiddleware(BaseHTTPMiddleware):
    def __init__(self, app):
        super().__init__(app)
        self.requests_total = {}
        self.errors_total = {}
        self.latency_ms = {}

    async def dispatch(self, request, call_next):
        key = f"{request.method} {request.url.path}"
        rid = getattr(request.state, "request_id", "n/a")
        start = time.perf_counter()
        self.requests_total[key] = self.requests_total.get(key, 0) + 1
        try:
            response = await call_next(request)
            if response.status_code >= 500:
                self.errors_total[key] = self.errors_total.get(key, 0) + 1
            return response
        except Exception:
            self.errors_total[key] = self.errors_total.get(key, 0) + 1
            logging.exception("[METRICS] request_id=%s path=%s error", rid, key)
            raise
        finally:
            elapsed = (time.perf_counter() - start) * 1000
            self.latency_ms[key] = elapsed
            logging.info("[METRICS] request_id=%s path=%s latency_ms=%.2f", rid, key, elapsed)
