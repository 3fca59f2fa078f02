# src/smart_todo/proxy/server.py

"""FastAPI binding for the proxy handler + uvicorn entry point."""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from ..config import Settings, get_settings
from ..logging_setup import level_from_name, setup_logging
from .handler import ProxyHandler, UpstreamFactory
from .upstream import AnthropicUpstream

logger = logging.getLogger(__name__)

PROXY_PATH = "/api/claude"


def create_app(
    settings: Settings | None = None,
    *,
    upstream_factory: UpstreamFactory | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    handler = ProxyHandler(
        upstream_factory or AnthropicUpstream,
        default_model=settings.default_model,
        default_max_tokens=settings.default_max_tokens,
    )

    app = FastAPI(
        title="Smart Todo AI Proxy",
        version="0.1.0",
        description="Forwards Messages API calls upstream with the caller's API key.",
    )

    origins = [o for o in settings.allowed_origins if o]
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_credentials=True,
            allow_methods=["POST", "OPTIONS"],
            allow_headers=["Content-Type", "x-api-key", "Authorization", "anthropic-version"],
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {
            "status": "OK",
            "message": "Smart Todo AI Server is running",
            "timestamp": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
        }

    @app.api_route(PROXY_PATH, methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"])
    async def claude_proxy(request: Request) -> Response:
        body = await request.body()
        result = await handler.handle(request.method, request.headers, body)
        if result.body is None:
            return Response(status_code=result.status, headers=result.headers)
        return JSONResponse(result.body, status_code=result.status, headers=result.headers)

    @app.options("/{path:path}")
    async def preflight(path: str) -> Response:
        return Response(status_code=200)

    @app.api_route("/{path:path}", methods=["GET", "POST", "PUT", "PATCH", "DELETE"])
    async def not_found(path: str) -> JSONResponse:
        return JSONResponse({"error": "Not found", "message": "Endpoint not found"}, status_code=404)

    return app


def main() -> None:
    import uvicorn

    settings = get_settings()
    console_level = level_from_name(settings.log_level)
    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Smart Todo AI Server on http://%s:%s", settings.proxy_host, settings.proxy_port)
    logger.info("Health check: http://%s:%s/health", settings.proxy_host, settings.proxy_port)
    logger.info("Proxy endpoint: http://%s:%s%s", settings.proxy_host, settings.proxy_port, PROXY_PATH)

    uvicorn.run(
        create_app(settings),
        host=settings.proxy_host,
        port=settings.proxy_port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
