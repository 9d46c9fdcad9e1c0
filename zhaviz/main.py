"""FastAPI application factory with lifespan events."""

from __future__ import annotations

import uuid
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from zhaviz.adapters.event_stream import StreamingRenderingAdapter
from zhaviz.api.dependencies import set_adapter, set_controller, set_topology
from zhaviz.api.router import api_router
from zhaviz.config import get_settings
from zhaviz.controller.interaction import InteractionController
from zhaviz.controller.state import InteractionState
from zhaviz.services.device_source import build_device_source
from zhaviz.services.topology_service import TopologyService
from zhaviz.utils.exceptions import DataFetchError
from zhaviz.utils.logging import get_logger, setup_logging

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Wire source, topology, renderer adapter and controller; load the first graph."""
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)

    source = build_device_source(settings)
    topology = TopologyService(source)
    adapter = StreamingRenderingAdapter()
    controller = InteractionController(
        adapter,
        topology,
        navigate=adapter.navigate,
        state=InteractionState(zoomed_device_id=settings.DEFAULT_ZOOM_DEVICE_ID or None),
    )
    set_topology(topology)
    set_adapter(adapter)
    set_controller(controller)

    # An unreachable gateway must not keep the API down; the graph stays empty
    # until a reload succeeds.
    try:
        await controller.load()
    except DataFetchError as exc:
        logger.warning("initial_topology_load_failed", error=str(exc))

    logger.info("app_started", source=type(source).__name__)
    yield

    # Shutdown
    await source.close()
    logger.info("app_stopped")


def create_app() -> FastAPI:
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)

    application = FastAPI(
        title="zhaviz",
        description="ZHA mesh topology graph and interactive view controller",
        version="0.1.0",
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.include_router(api_router)

    @application.middleware("http")
    async def request_id_middleware(request: Request, call_next) -> Response:
        request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response

    @application.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error("unhandled_exception", error=str(exc), path=request.url.path)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error", "type": type(exc).__name__},
        )

    return application


app = create_app()
