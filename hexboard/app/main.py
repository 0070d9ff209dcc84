"""FastAPI application serving the hex board."""

from __future__ import annotations

import contextlib
import logging
from collections.abc import AsyncGenerator
from typing import Any

import fastapi
import uvicorn

from .. import log, map_generator, settings
from . import routes

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Health router
# ---------------------------------------------------------------------------

_health_router = fastapi.APIRouter()


@_health_router.api_route('/health', methods=['GET', 'HEAD'])
async def health() -> dict[str, str]:
    """Health check endpoint."""
    return {'status': 'healthy'}


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------


@contextlib.asynccontextmanager
async def lifespan(app: fastapi.FastAPI) -> AsyncGenerator[None, None]:
    """Load the configured board template before serving requests."""
    generator = map_generator.MapGenerator(seed=settings.SEED)
    app.state.generator = generator
    if not await generator.load_map_from_template(settings.TEMPLATE_SOURCE):
        logger.warning(
            'Serving without a board; %s could not be loaded',
            settings.TEMPLATE_SOURCE,
        )
    yield


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------


def create_app(title: str, **kwargs: Any) -> fastapi.FastAPI:
    """Create a FastAPI app with health and board routes and logging configured.

    Additional keyword arguments are forwarded to FastAPI.__init__ (e.g. lifespan).
    """
    app = fastapi.FastAPI(title=title, **kwargs)
    log.configure_logging(settings.LOG_LEVEL)
    app.include_router(_health_router)
    app.include_router(routes.router)
    return app


app = create_app('Hex Board', lifespan=lifespan)


if __name__ == '__main__':
    uvicorn.run(app, host='0.0.0.0', port=8000)
