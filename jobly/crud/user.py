"""
CRUD operations for User model.

Used by the auth endpoints to register accounts and check credentials.
"""

import logging
from typing import Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from jobly.core.exceptions import BadRequestError, UnauthorizedError
from jobly.core.security import get_password_hash, verify_password
from jobly.models.user import User
from jobly.schemas.user import UserRegisterRequest

logger = logging.getLogger(__name__)


def get_by_username(db: Session, username: str) -> Optional[User]:
    """
    Retrieve a user by username.

    Returns:
        User instance if found, None otherwise
    """
    return db.query(User).filter(User.username == username).first()


def register(db: Session, user_data: UserRegisterRequest, is_admin: bool = False) -> User:
    """
    Create a new user with a hashed password.

    Raises:
        BadRequestError: If the username is taken
    """
    if get_by_username(db, user_data.username):
        raise BadRequestError(f"Duplicate username: {user_data.username}")

    db_user = User(
        username=user_data.username,
        hashed_password=get_password_hash(user_data.password),
        first_name=user_data.first_name,
        last_name=user_data.last_name,
        email=user_data.email,
        is_admin=is_admin
    )

    db.add(db_user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        # Registered by another request after our check
        logger.warning(f"Rejected duplicate username on insert: {user_data.username}")
        raise BadRequestError(f"Duplicate username: {user_data.username}")
    db.refresh(db_user)

    logger.info(f"Registered user {db_user.username}")
    return db_user


def authenticate(db: Session, username: str, password: str) -> User:
    """
    Check a username/password pair.

    Raises:
        UnauthorizedError: If the user doesn't exist or the password is wrong
    """
    user = get_by_username(db, username)
    if not user or not verify_password(password, user.hashed_password):
        logger.warning(f"Failed login for {username}")
        raise UnauthorizedError("Invalid username/password")

    return user
