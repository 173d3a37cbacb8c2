"""
LeadHub — FastAPI Service

Lead intake and scoring, provider/customer accounts, appointment scheduling,
and dashboard analytics for small service businesses.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from leadhub.config import settings
from leadhub.db.session import init_db
from leadhub.routes import analytics, appointments, auth, automation, leads

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize DB tables on startup (idempotent via CREATE TABLE IF NOT EXISTS)."""
    logger.info("Starting LeadHub API")
    await init_db()
    yield
    logger.info("LeadHub API shutting down")


app = FastAPI(
    title="LeadHub API",
    description="Lead intake, scoring, scheduling and dashboards for service businesses.",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router)
app.include_router(leads.router)
app.include_router(appointments.router)
app.include_router(analytics.router)
app.include_router(automation.router)


@app.get("/health", tags=["health"])
async def health():
    """Health check for load balancers and container orchestration."""
    return {"status": "ok"}
