"""Mentor profile API router."""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from fastapi import APIRouter, Depends, File, Form, Query, Response, UploadFile, status
from pydantic import ValidationError

from app.modules.mentors.schemas import MentorProfileDetail, MentorProfileUpsert, MentorProfileWriteResult
from app.modules.mentors.service import MentorsService, get_mentors_service
from app.shared.exceptions import ValidationException
from app.shared.pagination import Page, build_page, get_pagination_params

router = APIRouter(prefix="/mentors", tags=["mentors"])


def _write_status(result: MentorProfileWriteResult) -> int:
    return status.HTTP_201_CREATED if result.created else status.HTTP_200_OK


def build_form_payload(**fields: Any) -> MentorProfileUpsert:
    """Validate multipart form fields against the upsert schema limits."""
    try:
        return MentorProfileUpsert(**fields)
    except ValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(part) for part in first["loc"]) or "form"
        raise ValidationException(f"{field}: {first['msg']}") from exc


@router.post("/profile", response_model=MentorProfileWriteResult)
async def upsert_profile_form(
    response: Response,
    user_id: int | None = Form(default=None),
    username: str | None = Form(default=None),
    category: str | None = Form(default=None),
    bio: str | None = Form(default=None),
    skills: str | None = Form(default=None),
    other_skills: str | None = Form(default=None),
    hourly_rate: Decimal | None = Form(default=None),
    resume: UploadFile | None = File(default=None),
    service: MentorsService = Depends(get_mentors_service),
) -> MentorProfileWriteResult:
    """Create or update mentor profile from a multipart form with optional resume."""
    payload = build_form_payload(
        user_id=user_id,
        username=username,
        category=category,
        bio=bio,
        skills=skills,
        other_skills=other_skills,
        hourly_rate=hourly_rate,
    )
    if resume is not None and not resume.filename:
        resume = None
    result = await service.create_or_update_profile(payload, resume_file=resume)
    response.status_code = _write_status(result)
    return result


@router.put("/profile", response_model=MentorProfileWriteResult)
async def upsert_profile_json(
    payload: MentorProfileUpsert,
    response: Response,
    service: MentorsService = Depends(get_mentors_service),
) -> MentorProfileWriteResult:
    """Create or update mentor profile from JSON; skills may be lists."""
    result = await service.create_or_update_profile(payload)
    response.status_code = _write_status(result)
    return result


@router.get("/profile/{user_id}", response_model=MentorProfileDetail)
async def get_profile(
    user_id: int,
    service: MentorsService = Depends(get_mentors_service),
) -> MentorProfileDetail:
    """Get mentor profile by user id."""
    return await service.get_profile(user_id)


@router.get("/profiles", response_model=Page[MentorProfileDetail])
async def list_profiles(
    category: str | None = Query(default=None),
    pagination=Depends(get_pagination_params),
    service: MentorsService = Depends(get_mentors_service),
) -> Page[MentorProfileDetail]:
    """List mentor profiles."""
    items, total = await service.list_profiles(category, pagination.limit, pagination.offset)
    return build_page(items, total, pagination)
