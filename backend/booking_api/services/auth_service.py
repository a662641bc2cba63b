"""
Authentication service handling user registration and login.
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from booking_api.models.user import User
from booking_api.schemas.user import UserCreate, UserLogin
from booking_api.core.exceptions import DuplicateEmail, InvalidCredentials
from booking_api.core.metrics import record_auth_attempt
from booking_api.core.security import hash_password, verify_password, create_access_token
from booking_api.core.logging import get_logger

logger = get_logger(__name__)


async def email_taken(db: AsyncSession, email: str, exclude_user_id: Optional[int] = None) -> bool:
    query = select(User.id).where(User.email == email)
    if exclude_user_id is not None:
        query = query.where(User.id != exclude_user_id)
    result = await db.execute(query)
    return result.scalar_one_or_none() is not None


async def register_user(db: AsyncSession, user_data: UserCreate) -> User:
    """
    Register a new user with a hashed password.
    Raises DuplicateEmail if the email is already registered.
    """
    if await email_taken(db, user_data.email):
        logger.warning("registration_failed", reason="email_exists", email=user_data.email)
        record_auth_attempt("register", success=False)
        raise DuplicateEmail()

    user = User(
        name=user_data.name,
        email=user_data.email,
        hashed_password=hash_password(user_data.password),
    )
    db.add(user)
    try:
        await db.commit()
    except IntegrityError as exc:
        # Lost a race with a concurrent registration for the same email
        await db.rollback()
        logger.warning("registration_failed", reason="email_exists", email=user_data.email)
        record_auth_attempt("register", success=False)
        raise DuplicateEmail() from exc
    await db.refresh(user)

    logger.info("user_registered", user_id=user.id, email=user.email)
    record_auth_attempt("register", success=True)
    return user


async def authenticate_user(db: AsyncSession, login_data: UserLogin) -> tuple[str, User]:
    """
    Check credentials and issue an access token.
    Unknown email and wrong password raise the same InvalidCredentials error.
    """
    result = await db.execute(select(User).where(User.email == login_data.email))
    user = result.scalar_one_or_none()

    if not user or not verify_password(login_data.password, user.hashed_password):
        logger.warning("login_failed", email=login_data.email)
        record_auth_attempt("login", success=False)
        raise InvalidCredentials()

    token = create_access_token(user.id, user.email)
    logger.info("user_logged_in", user_id=user.id)
    record_auth_attempt("login", success=True)
    return token, user
