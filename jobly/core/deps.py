"""
FastAPI dependencies for authentication and authorization.

Reads are public; mutations of companies and jobs require an admin token.
"""

import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from sqlalchemy.orm import Session

from jobly.core.database import get_db
from jobly.core.exceptions import UnauthorizedError
from jobly.core.security import decode_token
from jobly.crud import user as user_crud
from jobly.models.user import User

logger = logging.getLogger(__name__)

# Optional HTTP Bearer token scheme (Authorization: Bearer <token>)
optional_bearer = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(optional_bearer),
    db: Session = Depends(get_db)
) -> Optional[User]:
    """
    Extract the user from the JWT token if one was provided.

    A missing, invalid, or expired token, or a token for a user that no
    longer exists, yields None (anonymous access) rather than an error.
    """
    if not credentials:
        return None

    try:
        payload = decode_token(credentials.credentials)
    except JWTError:
        logger.info("Ignoring invalid bearer token")
        return None

    username = payload.get("sub")
    if username is None:
        return None

    return user_crud.get_by_username(db, username)


async def get_admin_user(
    user: Optional[User] = Depends(get_current_user),
) -> User:
    """
    Require an authenticated admin.

    Raises:
        UnauthorizedError: If the caller is anonymous or not an admin
    """
    if user is None or not user.is_admin:
        raise UnauthorizedError("Unauthorized")

    return user
