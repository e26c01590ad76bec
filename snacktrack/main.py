"""Main FastAPI application."""
from fastapi import FastAPI
from contextlib import asynccontextmanager

from snacktrack.core.config import settings
from snacktrack.core.logging import setup_logging
from snacktrack.db.database import init_db
from snacktrack.api import health, orders, menu
from snacktrack.api.webhooks import messenger


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    setup_logging()
    await init_db()
    yield


app = FastAPI(
    title="SnackTrack",
    description="Chat ordering and order tracking for small restaurants",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(health.router, tags=["health"])
app.include_router(messenger.router, tags=["webhooks"])
app.include_router(orders.router, tags=["orders"])
app.include_router(menu.router, tags=["menu"])


@app.get("/")
async def root():
    return {
        "message": f"{settings.restaurant_name} API",
        "version": "0.1.0",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("snacktrack.main:app", host=settings.host, port=settings.port)
