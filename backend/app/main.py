"""
Main module that runs the whole application.
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from app.routers import activities, webhooks
from utils import logging
from utils.database import Database
from utils.redis_client import RedisClient

logging.setup_logger()
logger = logging.get_logger(__name__)


def create_app(database: Optional[Database] = None) -> FastAPI:
    """
    Build the application.
    :param database: Store to use. When omitted one is built from DATABASE_URL at startup.
    :return: FastAPI application
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owns_database = app.state.database is None
        if owns_database:
            app.state.database = Database()
        app.state.database.create_all()
        logger.info("Database ready")
        try:
            yield
        finally:
            if owns_database:
                app.state.database.dispose()
            await RedisClient.close()

    app = FastAPI(title="Work Monitor", lifespan=lifespan)
    app.state.database = database
    app.include_router(webhooks.router)
    app.include_router(activities.router)

    @app.get("/")
    async def root():
        """
        Root endpoint.
        :return: HTTP response
        """
        return {"message": "Work Monitor is running"}

    return app


app = create_app()
