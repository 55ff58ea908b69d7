"""FastAPI dependencies: backend, assistant and authenticated user."""

from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from nexushub.auth.jwt import get_user_id_from_token
from nexushub.database.database import init_db
from nexushub.integrations.openai_client import AssistantClient
from nexushub.storage.backend import LocalBackend
from nexushub.storage.base import PersistenceBackend

# HTTP Bearer token security scheme
security = HTTPBearer(auto_error=False)

_backend: Optional[PersistenceBackend] = None
_assistant: Optional[AssistantClient] = None


def get_backend() -> PersistenceBackend:
    """Shared SQL-backed local backend (created on first use)."""
    global _backend
    if _backend is None:
        init_db()
        # One backend serves every API user, so no single-user session record.
        _backend = LocalBackend(remember_session=False)
    return _backend


def get_assistant() -> AssistantClient:
    global _assistant
    if _assistant is None:
        _assistant = AssistantClient()
    return _assistant


def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> str:
    """Resolve the user id from the bearer token.

    Raises:
        HTTPException: 401 if the token is missing, invalid or expired
    """
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Please authenticate",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user_id = get_user_id_from_token(credentials.credentials)
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user_id
