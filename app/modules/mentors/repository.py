"""Mentor profile repository layer."""

from __future__ import annotations

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.enums import RoleEnum
from app.modules.identity.models import Role, User
from app.modules.mentors.models import MentorProfile


class MentorsRepository:
    """DB operations for mentor profiles."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_mentor_user(self, user_id: int) -> User | None:
        stmt = (
            select(User)
            .join(Role, User.role_id == Role.id)
            .where(User.id == user_id, Role.name == RoleEnum.MENTOR)
        )
        return await self.session.scalar(stmt)

    async def get_profile_by_user_id(self, user_id: int) -> MentorProfile | None:
        stmt = select(MentorProfile).where(MentorProfile.user_id == user_id)
        return await self.session.scalar(stmt)

    async def create_profile(self, user_id: int, **fields) -> MentorProfile:
        profile = MentorProfile(user_id=user_id, **fields)
        self.session.add(profile)
        await self.session.flush()
        return profile

    async def update_profile(self, profile: MentorProfile, **changes) -> MentorProfile:
        for key, value in changes.items():
            if value is not None:
                setattr(profile, key, value)
        await self.session.flush()
        return profile

    async def get_profile_with_contact(self, user_id: int) -> tuple[MentorProfile, User] | None:
        stmt = (
            select(MentorProfile, User)
            .join(User, MentorProfile.user_id == User.id)
            .where(MentorProfile.user_id == user_id)
        )
        row = (await self.session.execute(stmt)).first()
        if row is None:
            return None
        return row[0], row[1]

    async def list_profiles_with_contact(
        self,
        category: str | None,
        limit: int,
        offset: int,
    ) -> tuple[list[tuple[MentorProfile, User]], int]:
        base_stmt: Select[tuple[MentorProfile, User]] = select(MentorProfile, User).join(
            User,
            MentorProfile.user_id == User.id,
        )
        if category is not None:
            base_stmt = base_stmt.where(MentorProfile.category == category)

        count_stmt = select(func.count()).select_from(base_stmt.subquery())
        total = int((await self.session.scalar(count_stmt)) or 0)

        stmt = base_stmt.order_by(MentorProfile.created_at.desc()).limit(limit).offset(offset)
        rows = (await self.session.execute(stmt)).all()
        return [(row[0], row[1]) for row in rows], total
