from __future__ import annotations

from fastapi import FastAPI

from vite_mini.api.dependencies import build_dispatcher
from vite_mini.api.lifespan import lifespan
from vite_mini.api.routes.health import router as health_router
from vite_mini.api.routes.modules import router as modules_router
from vite_mini.config import DevServerSettings, load_settings
from vite_mini.core.dispatcher import Dispatcher


def create_app(settings: DevServerSettings | None = None, dispatcher: Dispatcher | None = None) -> FastAPI:
    app = FastAPI(
        title="vite-mini",
        description="No-bundle development server for ES module projects.",
        version="0.1.0",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    # One dispatcher (and pre-bundle cache) per application instance.
    app.state.dispatcher = dispatcher or build_dispatcher(settings or load_settings())

    # Health routes first: the module route matches every path.
    app.include_router(health_router, include_in_schema=False)
    app.include_router(modules_router, include_in_schema=False)

    return app
