"""
FastAPI dependencies: the ingestion context and the internal-key guard.
"""

import secrets
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import APIKeyHeader

from harbourmaster.pipeline.context import IngestContext

api_key_scheme = APIKeyHeader(name="X-API-Key", auto_error=False)


def get_context(request: Request) -> IngestContext:
    """The IngestContext built at startup (or injected by tests)."""
    return request.app.state.context


def require_api_key(
    api_key: Optional[str] = Depends(api_key_scheme),
    ctx: IngestContext = Depends(get_context),
) -> None:
    """Internal key check. Disabled when no key is configured."""
    expected = ctx.settings.internal_api_key
    if expected is None:
        return

    if api_key is None or not secrets.compare_digest(api_key, expected):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing API key",
        )
