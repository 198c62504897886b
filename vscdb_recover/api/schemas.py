"""
Pydantic schemas for API request/response models.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class Message(BaseModel):
    """Recovered message as returned by the API; ``timestamp`` is omitted when unknown."""

    id: str
    role: str
    text: str
    timestamp: Optional[str] = None
    raw: Any = None


class ExtractResponse(BaseModel):
    """Result of ``POST /api/extract``."""

    filename: str
    extractedAt: str
    messages: List[Message] = Field(default_factory=list)
    raw: Dict[str, Any] = Field(default_factory=dict)
    tables: List[str] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    """Error body."""

    error: str
    details: Optional[str] = None
