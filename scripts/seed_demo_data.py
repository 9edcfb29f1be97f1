"""Seed idempotent demo data for local/non-production environments."""

from __future__ import annotations

import argparse
import asyncio
from dataclasses import dataclass
from datetime import date, time, timedelta
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.database import SessionLocal, close_engine
from app.core.enums import RoleEnum
from app.core.security import hash_password, verify_password
from app.modules.identity.models import Role, User
from app.modules.mentors.repository import MentorsRepository
from app.modules.mentors.schemas import MentorProfileUpsert
from app.modules.mentors.service import MentorsService
from app.modules.mentors.storage import get_resume_storage
from app.modules.slots.models import MentorSlot
from app.modules.slots.repository import SlotsRepository

DEMO_PASSWORD = "DemoPass123!"
DEMO_USER_EMAIL = "demo-user@coachconnect.dev"

DEMO_SLOT_DAY_OFFSETS = (1, 2, 3, 4, 5)
DEMO_SLOT_START_TIMES = (time(10, 0), time(14, 0), time(18, 30))


@dataclass(frozen=True, slots=True)
class DemoMentor:
    name: str
    email: str
    category: str
    skills: tuple[str, ...]
    hourly_rate: Decimal
    bio: str


DEMO_MENTORS = (
    DemoMentor(
        name="Sarah Johnson",
        email="sarah.johnson@coachconnect.dev",
        category="Career Development",
        skills=("Leadership", "Communication", "Strategic Planning"),
        hourly_rate=Decimal("1500.00"),
        bio="Experienced career coach with 10+ years helping professionals advance their careers.",
    ),
    DemoMentor(
        name="Michael Chen",
        email="michael.chen@coachconnect.dev",
        category="Technology Leadership",
        skills=("Software Development", "Team Management", "Product Strategy"),
        hourly_rate=Decimal("2000.00"),
        bio="Tech industry veteran specializing in leadership development for software teams.",
    ),
    DemoMentor(
        name="Emily Rodriguez",
        email="emily.rodriguez@coachconnect.dev",
        category="Personal Development",
        skills=("Goal Setting", "Time Management", "Work-Life Balance"),
        hourly_rate=Decimal("1200.00"),
        bio="Certified life coach focused on helping individuals achieve personal and professional goals.",
    ),
    DemoMentor(
        name="David Kumar",
        email="david.kumar@coachconnect.dev",
        category="Business Strategy",
        skills=("Entrepreneurship", "Marketing", "Financial Planning"),
        hourly_rate=Decimal("2500.00"),
        bio="Serial entrepreneur and business consultant with expertise in scaling startups.",
    ),
    DemoMentor(
        name="Lisa Thompson",
        email="lisa.thompson@coachconnect.dev",
        category="Communication Skills",
        skills=("Public Speaking", "Negotiation", "Conflict Resolution"),
        hourly_rate=Decimal("1800.00"),
        bio="Communication expert helping professionals improve their interpersonal skills.",
    ),
    DemoMentor(
        name="James Wilson",
        email="james.wilson@coachconnect.dev",
        category="Financial Planning",
        skills=("Investment Strategy", "Retirement Planning", "Wealth Management"),
        hourly_rate=Decimal("3000.00"),
        bio="Certified financial planner with 15+ years of experience in wealth management.",
    ),
)


@dataclass(slots=True)
class SeedStats:
    roles_created: int = 0
    users_created: int = 0
    users_updated: int = 0
    profiles_created: int = 0
    slots_created: int = 0


async def _ensure_roles(session: AsyncSession) -> int:
    created = 0
    for role_name in RoleEnum:
        existing = await session.scalar(select(Role).where(Role.name == role_name))
        if existing is None:
            session.add(Role(name=role_name))
            created += 1
    await session.flush()
    return created


async def _ensure_user(
    session: AsyncSession,
    *,
    name: str,
    email: str,
    role_name: RoleEnum,
) -> tuple[User, bool]:
    role = await session.scalar(select(Role).where(Role.name == role_name))
    if role is None:
        raise RuntimeError(f"Role {role_name} was not found after ensure_roles")

    user = await session.scalar(select(User).where(User.email == email))
    created = False
    if user is None:
        user = User(
            name=name,
            email=email,
            password_hash=hash_password(DEMO_PASSWORD),
            is_active=True,
            role_id=role.id,
        )
        session.add(user)
        created = True
    else:
        if not verify_password(DEMO_PASSWORD, user.password_hash):
            user.password_hash = hash_password(DEMO_PASSWORD)
        if user.role_id != role.id:
            user.role_id = role.id
        if not user.is_active:
            user.is_active = True

    await session.flush()
    return user, created


async def _ensure_mentor_profile(session: AsyncSession, mentor_user: User, mentor: DemoMentor) -> bool:
    service = MentorsService(MentorsRepository(session), get_resume_storage())
    result = await service.create_or_update_profile(
        MentorProfileUpsert(
            user_id=mentor_user.id,
            username=mentor.email.split("@", 1)[0],
            category=mentor.category,
            bio=mentor.bio,
            skills=list(mentor.skills),
            hourly_rate=mentor.hourly_rate,
        ),
    )
    return result.created


def _build_demo_slot_starts(today: date) -> list[tuple[date, time]]:
    return [
        (today + timedelta(days=offset), start_time)
        for offset in DEMO_SLOT_DAY_OFFSETS
        for start_time in DEMO_SLOT_START_TIMES
    ]


async def _ensure_demo_slots(session: AsyncSession, mentor_user: User) -> int:
    repository = SlotsRepository(session)
    created = 0

    for slot_date, start_time in _build_demo_slot_starts(date.today()):
        existing = await session.scalar(
            select(MentorSlot).where(
                MentorSlot.mentor_id == mentor_user.id,
                MentorSlot.date == slot_date,
                MentorSlot.start_time == start_time,
            ),
        )
        if existing is not None:
            continue

        await repository.create_slot(
            mentor_id=mentor_user.id,
            slot_date=slot_date,
            start_time=start_time,
            end_time=None,
        )
        created += 1

    return created


async def _run_seed(*, allow_production: bool) -> SeedStats:
    settings = get_settings()
    app_env = settings.app_env.strip().lower()
    if app_env in {"production", "prod"} and not allow_production:
        raise RuntimeError(
            "Refusing to seed demo data in production. "
            "Re-run with --allow-production only if you are absolutely sure.",
        )

    stats = SeedStats()

    async with SessionLocal() as session:
        try:
            stats.roles_created = await _ensure_roles(session)

            _, user_created = await _ensure_user(
                session,
                name="Demo User",
                email=DEMO_USER_EMAIL,
                role_name=RoleEnum.USER,
            )
            stats.users_created += int(user_created)

            for mentor in DEMO_MENTORS:
                mentor_user, mentor_created = await _ensure_user(
                    session,
                    name=mentor.name,
                    email=mentor.email,
                    role_name=RoleEnum.MENTOR,
                )
                stats.users_created += int(mentor_created)
                stats.profiles_created += int(await _ensure_mentor_profile(session, mentor_user, mentor))
                stats.slots_created += await _ensure_demo_slots(session, mentor_user)

            stats.users_updated = len(DEMO_MENTORS) + 1 - stats.users_created

            await session.commit()
        except Exception:
            await session.rollback()
            raise

    return stats


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Seed idempotent demo data for CoachConnect (user, mentors, profiles, open slots).",
    )
    parser.add_argument(
        "--allow-production",
        action="store_true",
        help="Allow seeding even when APP_ENV is production/prod.",
    )
    return parser


def _print_summary(stats: SeedStats) -> None:
    print("Demo seed completed.")
    print(f"- Roles created: {stats.roles_created}")
    print(f"- Users created: {stats.users_created}")
    print(f"- Users updated: {stats.users_updated}")
    print(f"- Mentor profiles created: {stats.profiles_created}")
    print(f"- Slots created: {stats.slots_created}")
    print("")
    print("Demo credentials (non-production only):")
    print(f"- user:    {DEMO_USER_EMAIL} / {DEMO_PASSWORD}")
    for mentor in DEMO_MENTORS:
        print(f"- mentor:  {mentor.email} / {DEMO_PASSWORD}")


def main() -> int:
    parser = _build_parser()
    args = parser.parse_args()

    try:
        stats = asyncio.run(_run_seed(allow_production=args.allow_production))
    except Exception as exc:
        print(f"Demo seed failed: {exc}")
        return 1
    finally:
        asyncio.run(close_engine())

    _print_summary(stats)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
