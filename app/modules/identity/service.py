"""Identity business logic layer."""

from __future__ import annotations

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db_session
from app.core.enums import RoleEnum
from app.core.security import create_access_token, decode_token, hash_password, oauth2_scheme, verify_password
from app.modules.identity.models import User
from app.modules.identity.repository import IdentityRepository
from app.modules.identity.schemas import AccessToken, LoginRequest, UserCreate
from app.shared.exceptions import (
    AuthRequiredException,
    ConflictException,
    ForbiddenException,
    NotFoundException,
)


class IdentityService:
    """Identity domain service."""

    def __init__(self, repository: IdentityRepository) -> None:
        self.repository = repository

    async def ensure_default_roles(self) -> None:
        """Ensure all default roles exist."""
        for role_name in RoleEnum:
            role = await self.repository.get_role_by_name(role_name)
            if role is None:
                await self.repository.create_role(role_name)

    async def register(self, payload: UserCreate) -> User:
        """Register new user."""
        existing_user = await self.repository.get_user_by_email(payload.email)
        if existing_user is not None:
            raise ConflictException("User with this email already exists")

        role = await self.repository.get_role_by_name(payload.role)
        if role is None:
            raise NotFoundException("Role not found")

        return await self.repository.create_user(
            name=payload.name,
            email=payload.email,
            phone=payload.phone,
            password_hash=hash_password(payload.password),
            role_id=role.id,
        )

    async def login(self, payload: LoginRequest) -> AccessToken:
        """Authenticate user and issue access token."""
        user = await self.repository.get_user_by_email(payload.email)
        if user is None or not verify_password(payload.password, user.password_hash):
            raise AuthRequiredException("Invalid credentials")

        if not user.is_active:
            raise ForbiddenException("User is inactive")

        return AccessToken(access_token=create_access_token(subject=str(user.id), role=user.role.name))

    async def get_user_from_access_token(self, token: str) -> User:
        """Resolve user from access token."""
        payload = decode_token(token)
        if payload.get("type") != "access":
            raise AuthRequiredException("Invalid access token")

        subject = payload.get("sub")
        if not subject or not str(subject).isdigit():
            raise AuthRequiredException("Token subject is missing")

        user = await self.repository.get_user_by_id(int(subject))
        if user is None:
            raise AuthRequiredException("User not found")
        if not user.is_active:
            raise ForbiddenException("User is inactive")

        return user


async def get_identity_service(session: AsyncSession = Depends(get_db_session)) -> IdentityService:
    """Dependency to provide identity service."""
    return IdentityService(IdentityRepository(session))


async def get_optional_user(
    token: str | None = Depends(oauth2_scheme),
    service: IdentityService = Depends(get_identity_service),
) -> User | None:
    """Resolve the caller from a bearer token, or None when no token was sent."""
    if not token:
        return None
    return await service.get_user_from_access_token(token)


async def get_current_user(current_user: User | None = Depends(get_optional_user)) -> User:
    """Resolve currently authenticated user from bearer token."""
    if current_user is None:
        raise AuthRequiredException("Please login first")
    return current_user
