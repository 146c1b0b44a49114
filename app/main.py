from contextlib import asynccontextmanager

from fastapi import FastAPI
from loguru import logger
from tortoise.contrib.fastapi import RegisterTortoise

from app import settings
from app.routers import account, auth, booking, dashboard, notification, view

TORTOISE_MODULES = {"models": ["app.models"]}


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Connecting to {}", settings.db_url.split("@")[-1])
    async with RegisterTortoise(
        app,
        db_url=settings.db_url,
        modules=TORTOISE_MODULES,
        # CREATE ... IF NOT EXISTS, so re-running on a migrated DB is a no-op
        generate_schemas=settings.generate_schemas,
    ):
        yield


def create_app() -> FastAPI:
    app = FastAPI(title="Event Bookings", lifespan=lifespan)
    for module in (auth, account, booking, notification, dashboard, view):
        app.include_router(module.router)
    return app


app = create_app()
