"""
FastAPI dependencies for authorization and data access.
"""

import logging
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from typing import Any, Dict, Optional

from app.core.database import DatabaseClient, get_db_client
from app.core.exceptions import UnauthorizedError
from app.core.security import decode_token
from app.crud.job import JobRepository

logger = logging.getLogger(__name__)

# Bearer token is optional; anonymous requests are allowed on public routes
security = HTTPBearer(auto_error=False)


def get_current_claims(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[Dict[str, Any]]:
    """
    Return the verified token claims, or None for anonymous requests.

    An invalid or expired token is treated the same as no token.
    """
    if not credentials:
        return None

    try:
        return decode_token(credentials.credentials)
    except JWTError as e:
        logger.info(f"Ignoring invalid bearer token: {e}")
        return None


def require_admin(
    claims: Optional[Dict[str, Any]] = Depends(get_current_claims),
) -> Dict[str, Any]:
    """
    Ensure the caller is logged in as an admin.

    Raises:
        UnauthorizedError: If anonymous or not an admin
    """
    if not claims or claims.get("isAdmin") is not True:
        raise UnauthorizedError()
    return claims


def get_job_repository(db: DatabaseClient = Depends(get_db_client)) -> JobRepository:
    """Job repository bound to the request's database session."""
    return JobRepository(db)
