"""Mentor profile business logic layer."""

from __future__ import annotations

import json
import logging
from typing import Any

from fastapi import Depends, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db_session
from app.modules.identity.models import User
from app.modules.mentors.models import MentorProfile
from app.modules.mentors.repository import MentorsRepository
from app.modules.mentors.schemas import MentorProfileDetail, MentorProfileUpsert, MentorProfileWriteResult
from app.modules.mentors.storage import ResumeStorage, get_resume_storage
from app.shared.exceptions import ForbiddenException, NotFoundException, ValidationException

logger = logging.getLogger(__name__)


def serialize_skills(value: Any) -> str | None:
    """Store strings verbatim and JSON-encode structured values; empty means unset."""
    if not value:
        return None
    if isinstance(value, str):
        return value
    return json.dumps(value)


def build_profile_detail(profile: MentorProfile, user: User) -> MentorProfileDetail:
    return MentorProfileDetail(
        id=profile.id,
        user_id=profile.user_id,
        username=profile.username,
        category=profile.category,
        bio=profile.bio,
        skills=profile.skills,
        other_skills=profile.other_skills,
        resume=profile.resume,
        hourly_rate=profile.hourly_rate,
        name=user.name,
        email=user.email,
        phone=user.phone,
        created_at=profile.created_at,
        updated_at=profile.updated_at,
    )


class MentorsService:
    """Mentor profile domain service."""

    def __init__(self, repository: MentorsRepository, resume_storage: ResumeStorage) -> None:
        self.repository = repository
        self.resume_storage = resume_storage

    async def create_or_update_profile(
        self,
        payload: MentorProfileUpsert,
        resume_file: UploadFile | None = None,
    ) -> MentorProfileWriteResult:
        """Insert the mentor's profile or partially update the existing one."""
        if payload.user_id is None:
            raise ValidationException("user_id is required")

        mentor = await self.repository.get_mentor_user(payload.user_id)
        if mentor is None:
            raise ForbiddenException("User is not a mentor")

        resume = None
        if resume_file is not None:
            resume = await self.resume_storage.save(resume_file)

        fields = {
            "username": payload.username,
            "category": payload.category,
            "bio": payload.bio,
            "skills": serialize_skills(payload.skills),
            "other_skills": serialize_skills(payload.other_skills),
            "resume": resume,
            "hourly_rate": payload.hourly_rate,
        }

        existing = await self.repository.get_profile_by_user_id(payload.user_id)
        if existing is not None:
            await self.repository.update_profile(existing, **fields)
            logger.info("Updated mentor profile %s for user %s", existing.id, payload.user_id)
            return MentorProfileWriteResult(message="Mentor profile updated!", id=existing.id, created=False)

        profile = await self.repository.create_profile(payload.user_id, **fields)
        logger.info("Created mentor profile %s for user %s", profile.id, payload.user_id)
        return MentorProfileWriteResult(message="Mentor profile created!", id=profile.id, created=True)

    async def get_profile(self, user_id: int) -> MentorProfileDetail:
        """Return mentor profile merged with user contact fields."""
        row = await self.repository.get_profile_with_contact(user_id)
        if row is None:
            raise NotFoundException("Mentor profile not found")
        profile, user = row
        return build_profile_detail(profile, user)

    async def list_profiles(
        self,
        category: str | None,
        limit: int,
        offset: int,
    ) -> tuple[list[MentorProfileDetail], int]:
        """List mentor profiles for discovery."""
        rows, total = await self.repository.list_profiles_with_contact(category, limit, offset)
        return [build_profile_detail(profile, user) for profile, user in rows], total


async def get_mentors_service(
    session: AsyncSession = Depends(get_db_session),
    resume_storage: ResumeStorage = Depends(get_resume_storage),
) -> MentorsService:
    """Dependency provider for mentors service."""
    return MentorsService(MentorsRepository(session), resume_storage)
