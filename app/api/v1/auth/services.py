"""
Authentication service layer
Handles business logic for authentication
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
import uuid
import logging

from app.models import User, UserRole, Order
from app.models.base import utcnow
from app.core.security import SecurityUtils
from app.core.config import settings
from app.core.exceptions import (
    BadRequestException,
    UnauthorizedException,
    NotFoundException,
    ConflictException,
    DuplicateResourceException
)
from app.utils.pagination import paginate, PaginationParams
from .schemas import RegisterRequest, TokenResponse

logger = logging.getLogger(__name__)

class AuthService:
    """Authentication service"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_user(self, user_id: uuid.UUID) -> User:
        result = await self.db.execute(select(User).where(User.id == user_id))
        user = result.scalar_one_or_none()
        if not user:
            raise NotFoundException("User not found")
        return user

    async def register(self, request: RegisterRequest) -> User:
        """
        Register new user

        Args:
            request: Registration request data

        Returns:
            Created user

        Raises:
            DuplicateResourceException: If email already exists
        """
        existing = await self.db.execute(
            select(User.id).where(User.email == request.email)
        )
        if existing.scalar_one_or_none():
            raise DuplicateResourceException("User", "email", request.email)

        user = User(
            email=request.email,
            name=request.name,
            password_hash=SecurityUtils.hash_password(request.password),
            role=UserRole.USER,
            address=None,
        )
        try:
            self.db.add(user)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info(f"New user registered: {user.email}")
        return user

    async def login(self, email: str, password: str) -> User:
        """
        Check credentials and record the login

        Raises:
            UnauthorizedException: On unknown email, wrong password or inactive account
        """
        result = await self.db.execute(select(User).where(User.email == email))
        user = result.scalar_one_or_none()

        if not user or not SecurityUtils.verify_password(password, user.password_hash):
            logger.warning(f"Failed login attempt for {email}")
            raise UnauthorizedException("Invalid email or password")

        if not user.is_active:
            raise UnauthorizedException("Account is disabled")

        user.last_login = utcnow()
        await self.db.commit()

        return user

    def generate_tokens(self, user: User) -> TokenResponse:
        """Generate access and refresh tokens for user"""
        token_data = {
            "sub": str(user.id),
            "email": user.email,
            "role": user.role.value,
        }

        return TokenResponse(
            access_token=SecurityUtils.create_access_token(token_data),
            refresh_token=SecurityUtils.create_refresh_token({"sub": str(user.id)}),
            expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60
        )

    async def refresh_tokens(self, refresh_token: str) -> tuple[User, TokenResponse]:
        """
        Issue a new token pair from a refresh token

        Raises:
            UnauthorizedException: If the token is invalid or the user is gone
        """
        payload = SecurityUtils.decode_token(refresh_token)

        if payload.get("type") != "refresh":
            raise UnauthorizedException("Invalid token type")

        try:
            user_id = uuid.UUID(payload.get("sub"))
        except (TypeError, ValueError):
            raise UnauthorizedException("Invalid authentication credentials")

        result = await self.db.execute(
            select(User).where(User.id == user_id, User.is_active == True)
        )
        user = result.scalar_one_or_none()

        if not user:
            raise UnauthorizedException("User not found or inactive")

        return user, self.generate_tokens(user)

    async def change_password(self, user_id: uuid.UUID, current_password: str, new_password: str) -> None:
        user = await self.get_user(user_id)

        if not SecurityUtils.verify_password(current_password, user.password_hash):
            raise BadRequestException("Current password is incorrect")

        user.password_hash = SecurityUtils.hash_password(new_password)
        await self.db.commit()
        logger.info(f"Password changed for user {user.id}")

    async def list_users(self, params: PaginationParams) -> dict:
        query = select(User).order_by(User.created_at.desc())
        return await paginate(self.db, query, params)

    async def change_role(self, user_id: uuid.UUID, role: UserRole) -> User:
        user = await self.get_user(user_id)
        user.role = role
        await self.db.commit()
        logger.info(f"User {user.id} role changed to {role.value}")
        return user

    async def delete_user(self, user_id: uuid.UUID, acting_user_id: uuid.UUID) -> None:
        if user_id == acting_user_id:
            raise BadRequestException("You cannot delete your own account")

        user = await self.get_user(user_id)

        order_count = await self.db.scalar(
            select(func.count(Order.id)).where(Order.user_id == user_id)
        )
        if order_count:
            raise ConflictException("User has orders and cannot be deleted")

        try:
            await self.db.delete(user)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
        logger.info(f"User {user_id} deleted")
