"""
Extraction API route.

Accepts an uploaded ``state.vscdb`` file and returns the recovered
conversation together with the raw entries and table names.
"""
import logging
import math
from typing import Optional

from fastapi import APIRouter, File, UploadFile
from fastapi.responses import JSONResponse

from vscdb_recover.api.schemas import ErrorResponse, ExtractResponse, Message
from vscdb_recover.core.config import get_max_upload_bytes
from vscdb_recover.readers.base import StoreOpenError
from vscdb_recover.services.exporter import utc_now_iso
from vscdb_recover.services.extraction import (
    ConversationExtractor,
    EmptyUploadError,
    UnsupportedFileError,
    validate_upload_name,
)

logger = logging.getLogger(__name__)

router = APIRouter()

READ_CHUNK_SIZE = 1024 * 1024


def _error(status_code: int, error: str, details: Optional[str] = None) -> JSONResponse:
    body = ErrorResponse(error=error, details=details).model_dump(exclude_none=True)
    return JSONResponse(status_code=status_code, content=body)


def read_upload(file: UploadFile, limit: int) -> Optional[bytes]:
    """
    Read an uploaded file, giving up once it exceeds ``limit`` bytes.

    Parameters
    ----------
    file : UploadFile
        The upload; ``file.size`` is trusted when the server reported it
    limit : int
        Maximum accepted size in bytes

    Returns
    -------
    bytes or None
        The file contents, or None when the upload is too large. At most
        ``limit + 1`` bytes are ever read.
    """
    if file.size is not None and file.size > limit:
        return None

    chunks = []
    received = 0
    while True:
        chunk = file.file.read(min(READ_CHUNK_SIZE, limit + 1 - received))
        if not chunk:
            break
        received += len(chunk)
        if received > limit:
            return None
        chunks.append(chunk)
    return b"".join(chunks)


@router.post(
    "/extract",
    response_model=ExtractResponse,
    responses={
        400: {"model": ErrorResponse},
        413: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
def extract(file: Optional[UploadFile] = File(None)):
    """
    Extract the conversation from an uploaded database.

    Returns ``{filename, extractedAt, messages, raw, tables}``. Upload
    problems are reported as 400, database load and extraction failures as
    500 with ``details``.
    """
    if file is None or not file.filename:
        return _error(400, "Missing .vscdb file in request")

    try:
        validate_upload_name(file.filename)
    except UnsupportedFileError as e:
        return _error(400, str(e))

    data = read_upload(file, get_max_upload_bytes())
    if data is None:
        logger.warning("Rejected oversized upload: %s", file.filename)
        return _error(413, "Uploaded file is too large")
    logger.info("Processing file: %s, size: %d bytes", file.filename, len(data))

    extractor = ConversationExtractor()
    try:
        result = extractor.extract_from_bytes(data, file.filename)
    except EmptyUploadError as e:
        return _error(400, str(e))
    except StoreOpenError as e:
        logger.error("Database load error: %s", e)
        return _error(500, "Failed to load database", str(e))
    except Exception as e:
        logger.error("Extraction error: %s", e, exc_info=True)
        return _error(500, "Failed to extract conversation", str(e))

    logger.info(
        "Extraction complete: %d messages, %d tables",
        len(result.messages),
        len(result.tables),
    )

    response = ExtractResponse(
        filename=file.filename,
        extractedAt=utc_now_iso(),
        messages=[Message.model_validate(m.to_dict()) for m in result.messages],
        raw=result.raw,
        tables=result.tables,
    )
    # Unset timestamps stay out of the body, matching the export shape
    return JSONResponse(content=_jsonable(response.model_dump(exclude_unset=True)))


def _jsonable(value):
    """Stringify values strict JSON cannot carry (bytes, NaN, infinities)."""
    if isinstance(value, dict):
        return {str(key): _jsonable(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_jsonable(item) for item in value]
    if isinstance(value, float) and not math.isfinite(value):
        return str(value)
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return str(value)
