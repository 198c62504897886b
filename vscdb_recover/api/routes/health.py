"""
Health check API route.
"""
from fastapi import APIRouter

from vscdb_recover import __version__

router = APIRouter()


@router.get("/health")
def health():
    """
    Health check endpoint.

    Extraction is stateless, so the server is ready as soon as it starts.
    """
    return {"status": "ready", "version": __version__}
