"""RentalOps — FastAPI application entry point."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from rentalops.api.v1.cleaner_accounts import router as cleaner_accounts_router
from rentalops.api.v1.cleaners import router as cleaners_router
from rentalops.api.v1.contacts import router as contacts_router
from rentalops.api.v1.email_templates import router as email_templates_router
from rentalops.api.v1.guests import router as guests_router
from rentalops.api.v1.lock_pins import router as lock_pins_router
from rentalops.api.v1.property_settings import router as settings_router
from rentalops.api.v1.reviews import router as reviews_router
from rentalops.config import settings

# Configure root logger so all rentalops.* loggers output to stderr.
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan handler for startup and shutdown events."""
    yield
    # Shutdown: dispose engine connections
    from rentalops.database import engine

    await engine.dispose()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Operations backend for short-term rental owners: lock PINs, guests, emails and reviews.",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(lock_pins_router)
app.include_router(settings_router)
app.include_router(email_templates_router)
app.include_router(contacts_router)
app.include_router(cleaners_router)
app.include_router(cleaner_accounts_router)
app.include_router(reviews_router)
app.include_router(guests_router)


@app.get("/health", tags=["health"])
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy", "service": settings.app_name}


@app.get("/", tags=["root"])
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {
        "service": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
    }
