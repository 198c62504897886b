"""
FastAPI application entry point for the vscdb-recover API.

Exposes the upload-and-extract endpoint and a health check.
"""

import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from vscdb_recover import __version__
from vscdb_recover.api.routes import extract, health

app = FastAPI(title="vscdb-recover API", version=__version__)

# Allow origins from environment variable or default to localhost
cors_origins = os.getenv(
    "CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000"
).split(",")

app.add_middleware(
    CORSMiddleware,
    allow_origins=[origin.strip() for origin in cors_origins],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(extract.router, prefix="/api", tags=["extract"])
app.include_router(health.router, prefix="/api", tags=["health"])
