"""
Echo server - Main Application
Serves static assets and echoes websocket messages back to their sender
"""
from fastapi import FastAPI, HTTPException, Request, WebSocket
from fastapi.responses import FileResponse
from contextlib import asynccontextmanager
import logging
import time

from connection import handle_connection
from log_setup import configure_logging
from settings import Settings
from static_assets import StaticAssets

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = app.state.settings
    configure_logging(settings.log_level)
    logger.info(
        "Echo server starting up...",
        extra={"static_dir": str(settings.static_dir), "ws_path": settings.ws_path},
    )
    if not settings.static_dir.is_dir():
        logger.warning(f"Static asset root {settings.static_dir} does not exist, every asset will 404")
    if settings.index_file is not None and not settings.index_file.is_file():
        logger.warning(f"Index file {settings.index_file} does not exist")
    yield
    logger.info("Echo server shutting down...")


def create_app(settings=None):
    """Wire the index route, the websocket route and the static fallback"""
    settings = settings or Settings.from_env()

    app = FastAPI(title="ws-echo-server", lifespan=lifespan)
    app.state.settings = settings

    @app.middleware("http")
    async def trace_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        fields = {
            "method": request.method,
            "path": request.url.path,
            "status": response.status_code,
            "latency_ms": round((time.perf_counter() - started) * 1000, 3),
        }
        if settings.log_headers:
            fields["headers"] = dict(request.headers)
        logger.info(f"{request.method} {request.url.path} -> {response.status_code}", extra=fields)
        return response

    if settings.index_file is not None:
        @app.get("/")
        async def index():
            logger.info("Request done on endpoint /")
            if not settings.index_file.is_file():
                raise HTTPException(404, f"Index file {settings.index_file.name} not found")
            return FileResponse(settings.index_file)

    @app.websocket(settings.ws_path)
    async def ws_handler(websocket: WebSocket):
        logger.info(f"Request done on endpoint {settings.ws_path}")
        await websocket.accept()
        await handle_connection(websocket)

    # Declared last: everything the routes above did not claim
    app.mount("/", StaticAssets(settings.static_dir), name="static")

    return app


app = create_app()


def main():
    settings = Settings.from_env()
    configure_logging(settings.log_level)

    import uvicorn
    logger.info(f"listening on {settings.host}:{settings.port}")
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
