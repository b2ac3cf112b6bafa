"""Caller identity for planner endpoints.

Every planner request resolves to a Caller: the shared API key is enforced
only when PLANNER_API_KEY is set, and X-Client-Id picks the planner_state
partition the request reads and writes.
"""

import hmac
import logging
import re
from dataclasses import dataclass

from fastapi import HTTPException, Header

from app.config import settings
from app.planner.store import DEFAULT_CLIENT_ID

logger = logging.getLogger(__name__)

CLIENT_ID_PATTERN = re.compile(r"[A-Za-z0-9][A-Za-z0-9._:-]{0,63}")


@dataclass(frozen=True, slots=True)
class Caller:
    client_id: str
    authenticated: bool = False


def presented_key(x_api_key: str | None, authorization: str | None) -> str | None:
    """X-API-Key wins; otherwise a Bearer token (scheme is case-insensitive)."""
    if x_api_key and x_api_key.strip():
        return x_api_key.strip()
    if authorization:
        scheme, _, token = authorization.partition(" ")
        if scheme.lower() == "bearer" and token.strip():
            return token.strip()
    return None


def check_client_id(raw: str | None) -> str:
    if raw is None:
        return DEFAULT_CLIENT_ID
    client_id = raw.strip()
    if not CLIENT_ID_PATTERN.fullmatch(client_id):
        raise HTTPException(
            status_code=400,
            detail="X-Client-Id must be 1-64 letters, digits, '.', '_', ':' or '-'.",
        )
    return client_id


async def require_caller(
    x_api_key: str | None = Header(default=None, alias="X-API-Key"),
    authorization: str | None = Header(default=None),
    x_client_id: str | None = Header(default=None, alias="X-Client-Id"),
) -> Caller:
    expected = settings.planner_api_key
    if expected is not None:
        key = presented_key(x_api_key, authorization)
        if key is None or not hmac.compare_digest(key.encode(), expected.encode()):
            logger.warning("Rejected planner request: invalid or missing API key")
            raise HTTPException(
                status_code=401,
                detail="Invalid or missing API key",
                headers={"WWW-Authenticate": "Bearer"},
            )

    return Caller(client_id=check_client_id(x_client_id), authenticated=expected is not None)
