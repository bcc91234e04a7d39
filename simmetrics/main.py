import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from simmetrics.api.routers.simulation import router as simulation_router
from simmetrics.common.config import Settings, get_settings
from simmetrics.common.logging import STARTUP_LOGGER, setup_logging
from simmetrics.domain import ValidationError
from simmetrics.infra.observability.middleware import MetricsMiddleware
from simmetrics.services import AppContext, build_context


def _log_startup(ctx: AppContext) -> None:
    startup_logger = logging.getLogger(STARTUP_LOGGER)
    base_url = ctx.settings.public_url
    startup_logger.info("Demo app starting on %s", base_url)
    startup_logger.info("Metrics will be served at %s/metrics", base_url)
    startup_logger.info("Health check will be served at %s/health", base_url)
    startup_logger.info(
        "Sampling simulated state every %.3fs", ctx.sampler.interval
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings.LOG_LEVEL)
    ctx = build_context(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        ctx.sampler.start()
        _log_startup(ctx)
        try:
            yield
        finally:
            await ctx.sampler.stop()
            logging.getLogger(STARTUP_LOGGER).info("Metrics sampler stopped")

    app = FastAPI(
        title="Simulated Metrics Service",
        version="1.0.0",
        description="Exposes simulated CPU, memory and health metrics for alerting demos",
        lifespan=lifespan,
    )
    app.state.context = ctx

    app.include_router(simulation_router, tags=["simulation"])
    app.add_middleware(MetricsMiddleware, instruments=ctx.instruments)

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        logger = logging.getLogger("http")
        logger.warning(
            "validation_error detail=%s method=%s path=%s request_id=%s",
            exc,
            request.method,
            request.url.path,
            request.headers.get("X-Request-Id"),
            extra={
                "extra": {
                    "status": 400,
                    "detail": str(exc),
                    "method": request.method,
                    "route": request.url.path,
                    "request_id": request.headers.get("X-Request-Id"),
                }
            },
        )
        return JSONResponse(status_code=400, content={"error": str(exc)})

    return app


app = create_app()


def run() -> None:
    settings = get_settings()
    # uvicorn logs "Uvicorn running on ..." once the socket is bound, and exits
    # with status 1 when it cannot be; log_config=None keeps setup_logging in charge
    uvicorn.run(
        "simmetrics.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_config=None,
    )


if __name__ == "__main__":
    run()
