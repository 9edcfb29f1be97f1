from __future__ import annotations

from types import SimpleNamespace

import pytest

from app.core.enums import RoleEnum
from app.core.security import create_access_token
from app.modules.identity.service import IdentityService, get_current_user, get_optional_user
from app.shared.exceptions import AuthRequiredException, ForbiddenException


class FakeIdentityRepository:
    def __init__(self, users: dict[int, SimpleNamespace]) -> None:
        self._users = users

    async def get_user_by_id(self, user_id: int) -> SimpleNamespace | None:
        return self._users.get(user_id)


def make_user(user_id: int, *, is_active: bool = True) -> SimpleNamespace:
    return SimpleNamespace(id=user_id, is_active=is_active, role=SimpleNamespace(name=RoleEnum.USER))


@pytest.mark.asyncio
async def test_access_token_resolves_user() -> None:
    service = IdentityService(FakeIdentityRepository({11: make_user(11)}))

    user = await service.get_user_from_access_token(create_access_token(subject="11", role="user"))

    assert user.id == 11


@pytest.mark.asyncio
async def test_invalid_or_unknown_tokens_require_login() -> None:
    service = IdentityService(FakeIdentityRepository({}))

    with pytest.raises(AuthRequiredException):
        await service.get_user_from_access_token("not-a-jwt")
    with pytest.raises(AuthRequiredException):
        await service.get_user_from_access_token(create_access_token(subject="99"))


@pytest.mark.asyncio
async def test_inactive_user_is_forbidden() -> None:
    service = IdentityService(FakeIdentityRepository({11: make_user(11, is_active=False)}))

    with pytest.raises(ForbiddenException):
        await service.get_user_from_access_token(create_access_token(subject="11"))


@pytest.mark.asyncio
async def test_missing_token_yields_no_identity() -> None:
    service = IdentityService(FakeIdentityRepository({}))

    assert await get_optional_user(token=None, service=service) is None
    with pytest.raises(AuthRequiredException):
        await get_current_user(current_user=None)
