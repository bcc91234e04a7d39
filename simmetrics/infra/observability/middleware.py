import logging
import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from simmetrics.infra.observability.metrics import AppInstruments


def resolve_route(request: Request) -> str:
    # 优先使用路由模板（如 /set-cpu/{value}）；未匹配的请求退回原始路径，基数无上限
    route_template = request.scope.get("route", None)
    if route_template and hasattr(route_template, "path"):
        return route_template.path
    return request.url.path


class MetricsMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp, instruments: AppInstruments) -> None:
        super().__init__(app)
        self.instruments = instruments

    def _record(self, method: str, route: str, status_code: int, elapsed: float) -> None:
        labels = (method, route, str(status_code))
        self.instruments.request_duration.labels(*labels).observe(elapsed)
        self.instruments.requests_total.labels(*labels).inc()

    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        request_id = request.headers.get("X-Request-Id") or str(uuid.uuid4())
        client = request.client or None
        client_ip = request.headers.get("X-Forwarded-For")
        if client_ip:
            client_ip = client_ip.split(",")[0].strip()
        elif client:
            client_ip = client.host
        else:
            client_ip = None

        logger = logging.getLogger("http")
        try:
            response = await call_next(request)
        except Exception as exc:
            elapsed = time.perf_counter() - start
            route = resolve_route(request)
            self._record(request.method, route, 500, elapsed)
            logger.exception(
                "request_error method=%s route=%s status=%s duration_ms=%.3f "
                "request_id=%s client_ip=%s",
                request.method,
                route,
                500,
                round(elapsed * 1000, 3),
                request_id,
                client_ip or "-",
                extra={
                    "extra": {
                        "method": request.method,
                        "route": route,
                        "status": 500,
                        "duration_ms": round(elapsed * 1000, 3),
                        "request_id": request_id,
                        "client_ip": client_ip,
                        "exception": repr(exc),
                    }
                },
            )
            raise

        elapsed = time.perf_counter() - start
        status_code = response.status_code
        route = resolve_route(request)
        self._record(request.method, route, status_code, elapsed)

        if "X-Request-Id" not in response.headers:
            response.headers["X-Request-Id"] = request_id

        level = logging.INFO
        if status_code >= 500:
            level = logging.ERROR
        elif status_code >= 400:
            level = logging.WARNING

        duration_ms = round(elapsed * 1000, 3)
        logger.log(
            level,
            "request method=%s route=%s status=%s duration_ms=%.3f "
            "request_id=%s client_ip=%s",
            request.method,
            route,
            status_code,
            duration_ms,
            request_id,
            client_ip or "-",
            extra={
                "extra": {
                    "method": request.method,
                    "route": route,
                    "status": status_code,
                    "duration_ms": duration_ms,
                    "request_id": request_id,
                    "client_ip": client_ip,
                }
            },
        )
        return response
