"""
api/server.py
-------------
FastAPI application entry point.

Run dev server:
    cd backend
    uvicorn api.server:app --reload --port 8000

Endpoints:
    GET  /v1/health
    POST /v1/plan/parse
    POST /v1/plan/itinerary
    POST /v1/plan/fuel-stops
"""
from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import config
from api.routes import health, plan

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="Errand Route Planner API",
    version="1.0.0",
    description=(
        "Time-budgeted errand planning: parses a free-text request, allocates "
        "dwell time across stops on an already-resolved route, and plans fuel stops."
    ),
    docs_url="/docs",
    redoc_url="/redoc",
)

# Allow the web client (any origin during development)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router, prefix="/v1",      tags=["Health"])
app.include_router(plan.router,   prefix="/v1/plan", tags=["Plan"])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("api.server:app", host="0.0.0.0", port=8000, reload=True)
