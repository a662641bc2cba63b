"""
Authentication endpoints: register and login.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from booking_api.db.session import get_db
from booking_api.schemas.user import UserCreate, UserResponse, UserLogin, UserSummary, LoginResponse
from booking_api.services.auth_service import register_user, authenticate_user

router = APIRouter(tags=["Authentication"])


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(user_data: UserCreate, db: AsyncSession = Depends(get_db)):
    """Register a new user account."""
    return await register_user(db, user_data)


@router.post("/login", response_model=LoginResponse)
async def login(login_data: UserLogin, db: AsyncSession = Depends(get_db)):
    """Authenticate and receive a bearer token valid for one hour."""
    token, user = await authenticate_user(db, login_data)
    return LoginResponse(token=token, user=UserSummary.model_validate(user))
