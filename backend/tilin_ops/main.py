"""TILIN OPS - FastAPI Application.

Restaurant stock forecasting, kitchen load and profitability analytics
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tilin_ops.api import analytics
from tilin_ops.core.config import settings

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title=settings.APP_NAME,
    description="TILIN OPS - Stock forecasting, kitchen load & business health",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(analytics.router)


@app.get("/")
async def root():
    """Health check endpoint."""
    return {
        "service": "TILIN OPS",
        "version": "1.0.0",
        "status": "operational",
    }


@app.get("/health")
async def health():
    return {"status": "healthy"}
