"""
FastAPI Application Entry Point.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api import router
from .config import settings, has_ai_credential
from .services.lookups import get_lookups


logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Load reference tables once so the first request does not pay for it
    tables = get_lookups()
    if has_ai_credential():
        logger.info(f"AI content enabled via {settings.llm_provider} ({settings.llm_model})")
    else:
        logger.info("No AI credential configured; serving fallback content only")
    logger.debug(f"Lookup gazetteer has {len(tables.entries('gazetteer'))} places")
    yield


app = FastAPI(
    title="Family Trip Engine",
    description="Trip stages, adaptive checklists and AI trip content with deterministic fallback",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "ai_enabled": has_ai_credential(),
        "llm_provider": settings.llm_provider,
        "currency": settings.default_currency
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "trip_engine.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
