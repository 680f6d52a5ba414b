import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from deposit_gateway import __version__
from deposit_gateway.core.config import Settings, get_settings
from deposit_gateway.core.container import ApplicationContainer
from deposit_gateway.core.logging import configure_logging
from deposit_gateway.interfaces.http.errors import register_exception_handlers
from deposit_gateway.interfaces.http.routers import create_api_router
from deposit_gateway.modules.chain.client import ChainClient

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, chain: Optional[ChainClient] = None) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(settings)
        container = ApplicationContainer.build(settings, chain=chain)
        await container.startup()
        app.state.container = container
        logger.info(
            "Deposit gateway %s started for recipient %s (%s)",
            __version__,
            container.recipient,
            settings.environment,
        )
        try:
            yield
        finally:
            await container.shutdown()
            logger.info("Deposit gateway shut down")

    app = FastAPI(
        title=settings.project_name,
        description="Non-custodial payment gateway with per-order deposit accounts",
        version=__version__,
        lifespan=lifespan,
    )

    register_exception_handlers(app)
    app.include_router(create_api_router(settings.api_prefix))
    return app


app = create_app()
