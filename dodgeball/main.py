import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from dodgeball.client import DodgeballClient
from dodgeball.load_settings import Settings, load_settings
from dodgeball.routers import simulate
from dodgeball.transport import GrpcTransport


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or load_settings()
    logging.basicConfig(level=logging.DEBUG if settings.debug else settings.log_level)

    @asynccontextmanager
    async def lifespan(app):
        """Open the one gRPC channel used by every request.
        This function is called to start the server.
        """
        transport = GrpcTransport(
            settings.address, debug=settings.debug, timeout=settings.timeout
        )
        app.state.client = DodgeballClient(transport)
        logging.info(f"Using dodgeball simulation service at {settings.address}")
        try:
            yield
        finally:
            await transport.close()
            logging.info("Stop Server")

    app = FastAPI(lifespan=lifespan)
    app.state.settings = settings
    app.include_router(simulate.simulate_router)
    return app


app = create_app()
