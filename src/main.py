import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Depends
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from sqlalchemy.orm import Session

from src.config import settings
from src.database import Base, SessionLocal, engine, get_db, ping
from src.exceptions import register_exception_handlers
from src.logging_config import get_logger
from src.middleware import RateLimitMiddleware, SecurityHeadersMiddleware
from src.tickets import router as tickets_router
from src.tickets.schemas import HealthStatus
from src import models  # noqa: F401  registers tables on Base.metadata

logger = get_logger("src.main")

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Refuse to serve traffic without a reachable store
    db = SessionLocal()
    try:
        if not ping(db):
            logger.critical("Store unreachable, refusing to start")
            raise RuntimeError("store unreachable")
    finally:
        db.close()

    Base.metadata.create_all(bind=engine)
    logger.info("Store connected")

    if not settings.ADMIN_TOKEN:
        logger.warning("ADMIN_TOKEN not set, ticket list and export are publicly readable")
    if not settings.MAIL_FROM:
        logger.info("MAIL_FROM not set, email notifications disabled")

    yield

# Create FastAPI app
app = FastAPI(
    title=settings.PROJECT_NAME,
    version="1.0.0",
    description="Event ticket reservation API",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

register_exception_handlers(app)

# Configure middleware; the last one added runs first
app.add_middleware(
    RateLimitMiddleware,
    limit=settings.RATE_LIMIT_MAX,
    window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
    path_prefix=settings.API_PREFIX
)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "X-Admin-Token"],
)

@app.get(f"{settings.API_PREFIX}/health", response_model=HealthStatus)
def health_check(db: Session = Depends(get_db)):
    """Health check endpoint"""
    return HealthStatus(ok=True, store=ping(db))

# Include routers
app.include_router(
    tickets_router,
    prefix=f"{settings.API_PREFIX}/tickets",
    tags=["Tickets"]
)

# Static site goes last so it never shadows the API
if settings.STATIC_DIR and os.path.isdir(settings.STATIC_DIR):
    app.mount("/", StaticFiles(directory=settings.STATIC_DIR, html=True), name="static")

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
