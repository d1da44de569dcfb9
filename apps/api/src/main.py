from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.core.database import get_prisma
from src.core.logging_config import setup_logging
from src.core.settings import settings
from src.domains.interests.routes import archive_router as interest_archive_router
from src.domains.interests.routes import router as interests_router
from src.domains.organisations.routes import router as organisations_router

logger = setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # Startup
    db = get_prisma()
    await db.connect()
    logger.info("Database connected")
    yield
    # Shutdown
    await db.disconnect()


app = FastAPI(
    title="Voluntarily API",
    description="API for matching volunteers with opportunities",
    version="0.1.0",
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(interests_router, prefix="/api")
app.include_router(interest_archive_router, prefix="/api")
app.include_router(organisations_router, prefix="/api")


@app.get("/")
async def root() -> dict[str, str]:
    return {"message": "Voluntarily API is running"}


@app.get("/health")
async def health_check() -> dict[str, str]:
    return {"status": "healthy"}
