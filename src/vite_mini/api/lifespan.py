from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    dispatcher = app.state.dispatcher
    logger.info("Serving %s", dispatcher.root)
    yield
    logger.info("Shutting down with %d pre-bundled module(s)", len(dispatcher.cache))
