"""
Request logging and in-memory request metrics.

LoggingMiddleware wraps every request: it assigns a short request id,
logs start and completion, counts it in the MetricsCollector and
echoes the id back in the X-Request-ID response header.
"""

import logging
import time
import uuid
from collections import Counter, deque
from typing import Callable, Deque, Dict

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from core.logging_config import set_request_id, clear_request_id

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

STATUS_CLASSES = ("2xx", "4xx", "5xx")
LATENCY_QUANTILES = (50, 95, 99)


class MetricsCollector:
    """
    Per-process request counts by status class, and latency quantiles over
    the last `window` requests.
    """

    def __init__(self, window: int = 1000):
        self.total = 0
        self.by_status: Counter = Counter()
        self.latencies_ms: Deque[float] = deque(maxlen=window)

    def observe(self, status_code: int, duration_ms: float) -> None:
        self.total += 1
        self.by_status[f"{status_code // 100}xx"] += 1
        self.latencies_ms.append(duration_ms)

    def quantile(self, q: int) -> float:
        """Nearest-rank latency for percentile q, 0 before any request."""
        if not self.latencies_ms:
            return 0.0
        ordered = sorted(self.latencies_ms)
        return round(ordered[min(len(ordered) * q // 100, len(ordered) - 1)], 2)

    def get_summary(self) -> Dict[str, float]:
        summary: Dict[str, float] = {"http_requests_total": self.total}
        for cls in STATUS_CLASSES:
            summary[f"http_requests_{cls}_total"] = self.by_status[cls]
        for q in LATENCY_QUANTILES:
            summary[f"http_request_duration_ms_p{q}"] = self.quantile(q)
        return summary

    def get_prometheus_format(self) -> str:
        """Render the counters and quantiles as Prometheus exposition text."""
        lines = [
            "# TYPE patient_svc_http_requests_total counter",
            f"patient_svc_http_requests_total {self.total}",
        ]
        lines += [
            f'patient_svc_http_requests_total{{status="{cls}"}} {self.by_status[cls]}'
            for cls in STATUS_CLASSES
        ]
        lines.append("# TYPE patient_svc_http_request_duration_ms summary")
        lines += [
            f'patient_svc_http_request_duration_ms{{quantile="{q / 100}"}} {self.quantile(q)}'
            for q in LATENCY_QUANTILES
        ]
        return "\n".join(lines) + "\n"


metrics_collector = MetricsCollector()


def get_metrics_collector() -> MetricsCollector:
    """Get the process-wide metrics collector."""
    return metrics_collector


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Request/response logging middleware with request_id propagation.

    Requests that end in 4xx/5xx are logged at WARNING so that rejected
    patient operations stand out from normal traffic.
    """

    # Probe and docs endpoints are not logged, only counted
    EXCLUDED_PATHS = {"/health", "/ready", "/metrics", "/metrics/json", "/docs", "/redoc", "/openapi.json"}

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = str(uuid.uuid4())[:8]
        set_request_id(request_id)

        method = request.method
        path = request.url.path
        start_time = time.perf_counter()

        if path not in self.EXCLUDED_PATHS:
            logger.info(
                "Request started",
                extra={
                    "method": method,
                    "path": path,
                    "query": str(request.query_params) if request.query_params else None,
                }
            )

        try:
            response = await call_next(request)
            status_code = response.status_code
        except Exception as e:
            logger.exception(
                "Request failed with exception",
                extra={"method": method, "path": path, "error": str(e)}
            )
            raise
        finally:
            duration_ms = (time.perf_counter() - start_time) * 1000
            clear_request_id()

        metrics_collector.observe(status_code, duration_ms)

        if path not in self.EXCLUDED_PATHS:
            log_level = logging.WARNING if status_code >= 400 else logging.INFO
            logger.log(
                log_level,
                "Request completed",
                extra={
                    "method": method,
                    "path": path,
                    "status_code": status_code,
                    "duration_ms": round(duration_ms, 2),
                }
            )

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
