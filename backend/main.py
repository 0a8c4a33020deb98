"""
Keyscope — natural-key schema inspector
FastAPI application entry point.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from api import health, inspect, schema
from config import settings

# ── Logging ──────────────────────────────────────────────────────────────────
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%S",
)
logger = logging.getLogger("keyscope")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Keyscope starting up…")
    yield
    logger.info("Keyscope shutting down.")


# ── App ───────────────────────────────────────────────────────────────────────
app = FastAPI(
    title="Keyscope — Natural-Key Schema Inspector",
    description="Reads catalog metadata and elects each table's main unique index.",
    version="1.0.0",
    lifespan=lifespan,
)

# ── Routers ───────────────────────────────────────────────────────────────────
app.include_router(health.router,  prefix="/api")
app.include_router(inspect.router, prefix="/api")
app.include_router(schema.router,  prefix="/api")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host=settings.API_HOST, port=settings.API_PORT)
