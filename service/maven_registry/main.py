# service/maven_registry/main.py
import re
import time

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware

from .api.v1 import health, maven_packages
from .core.config import get_settings
from .core.database import init_db
from .core.errors import RegistryError, StoreUnavailableError
from .core.logging_config import configure_logging


class NormalizePathMiddleware(BaseHTTPMiddleware):
    """Collapse repeated slashes so //projects maps to /projects."""

    async def dispatch(self, request, call_next):
        scope = request.scope
        original_path = scope.get("path", "")
        normalized_path = re.sub(r"/{2,}", "/", original_path)
        if normalized_path != original_path:
            logger.debug("Normalizing path from {} to {}", original_path, normalized_path)
            scope["path"] = normalized_path
        return await call_next(request)


class RequestLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        logger.info(
            "{} {} -> {} ({:.1f} ms)",
            request.method, request.url.path, response.status_code,
            (time.perf_counter() - started) * 1000,
        )
        return response


async def registry_error_handler(request: Request, exc: RegistryError):
    if exc.status_code >= 500:
        logger.error("{} {} failed: {}", request.method, request.url.path, exc.render())
    else:
        logger.info("{} {} rejected: {}", request.method, request.url.path, exc.render())
    headers = {}
    if isinstance(exc, StoreUnavailableError):
        headers["Retry-After"] = str(exc.retry_after_s)
    return JSONResponse(status_code=exc.status_code, content={"message": exc.render()}, headers=headers)


def create_app() -> FastAPI:
    configure_logging()
    settings = get_settings()
    app = FastAPI(title=settings.APP_NAME, version="1.0.0")

    app.add_middleware(RequestLogMiddleware)
    app.add_middleware(NormalizePathMiddleware)
    app.add_exception_handler(RegistryError, registry_error_handler)

    @app.on_event("startup")
    def startup_event():
        init_db()
        logger.info("Database initialized for {}", settings.APP_NAME)

    app.include_router(maven_packages.router, prefix=f"{settings.API_PREFIX}/projects", tags=["maven_packages"])
    app.include_router(health.router, prefix=f"{settings.API_PREFIX}/health", tags=["health"])

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
