from __future__ import annotations

from types import SimpleNamespace

import pytest

from app.services import user_onboarding
from app.services.user_onboarding import first_write_wins_updates


class _Session:
    def __init__(self) -> None:
        self.refreshed: list[object] = []

    async def refresh(self, instance) -> None:
        self.refreshed.append(instance)


def test_first_write_wins_updates_only_fills_blanks() -> None:
    assert first_write_wins_updates(
        current_display_name="Anna",
        current_phone=None,
        display_name="Other",
        phone="+100",
    ) == {"phone": "+100"}
    assert first_write_wins_updates(
        current_display_name=None,
        current_phone=None,
        display_name=None,
        phone="",
    ) == {}


@pytest.mark.asyncio
async def test_get_by_external_handle_delegates_to_users_repo(monkeypatch) -> None:
    expected_user = SimpleNamespace(id=23)
    captured: dict[str, object] = {}

    async def _fake_get_by_external_handle(session, external_handle: str):
        captured["session"] = session
        captured["external_handle"] = external_handle
        return expected_user

    monkeypatch.setattr(
        user_onboarding.UsersRepo,
        "get_by_external_handle",
        _fake_get_by_external_handle,
    )
    session = object()

    result = await user_onboarding.UserOnboardingService.get_by_external_handle(session, "@anna")

    assert result is expected_user
    assert captured == {"session": session, "external_handle": "@anna"}


@pytest.mark.asyncio
async def test_resolve_user_returns_freshly_created_row(monkeypatch) -> None:
    created_user = SimpleNamespace(id=1, display_name="Anna", phone=None)
    captured: dict[str, object] = {}

    async def _fake_create_once(session, **kwargs) -> bool:
        captured.update(kwargs)
        return True

    async def _fake_get(session, external_handle: str):
        return created_user

    async def _unexpected_fill(session, **kwargs) -> int:
        raise AssertionError("fresh rows need no profile fill")

    monkeypatch.setattr(user_onboarding.UsersRepo, "create_once", _fake_create_once)
    monkeypatch.setattr(user_onboarding.UsersRepo, "get_by_external_handle", _fake_get)
    monkeypatch.setattr(user_onboarding.UsersRepo, "fill_blank_fields", _unexpected_fill)
    session = _Session()

    user = await user_onboarding.UserOnboardingService.resolve_user(
        session,
        external_handle="@anna",
        display_name="Anna",
    )

    assert user is created_user
    assert captured["external_handle"] == "@anna"
    assert captured["language_code"] == "RU"
    assert session.refreshed == []


@pytest.mark.asyncio
async def test_resolve_user_fills_missing_fields_on_existing_row(monkeypatch) -> None:
    existing_user = SimpleNamespace(id=1, display_name="Anna", phone=None)

    async def _fake_create_once(session, **kwargs) -> bool:
        return False

    captured: dict[str, object] = {}

    async def _fake_get(session, external_handle: str):
        return existing_user

    async def _fake_fill(session, *, external_handle: str, values: dict[str, str]) -> int:
        captured["external_handle"] = external_handle
        captured["values"] = values
        return 1

    monkeypatch.setattr(user_onboarding.UsersRepo, "create_once", _fake_create_once)
    monkeypatch.setattr(user_onboarding.UsersRepo, "get_by_external_handle", _fake_get)
    monkeypatch.setattr(user_onboarding.UsersRepo, "fill_blank_fields", _fake_fill)
    session = _Session()

    user = await user_onboarding.UserOnboardingService.resolve_user(
        session,
        external_handle="@anna",
        display_name="Someone else",
        phone="+100",
    )

    assert user is existing_user
    assert captured == {"external_handle": "@anna", "values": {"phone": "+100"}}
    assert session.refreshed == [existing_user]


@pytest.mark.asyncio
async def test_resolve_user_skips_refresh_when_concurrent_writer_filled_field(monkeypatch) -> None:
    existing_user = SimpleNamespace(id=1, display_name=None, phone=None)

    async def _fake_create_once(session, **kwargs) -> bool:
        return False

    async def _fake_get(session, external_handle: str):
        return existing_user

    async def _fake_fill(session, *, external_handle: str, values: dict[str, str]) -> int:
        return 0

    monkeypatch.setattr(user_onboarding.UsersRepo, "create_once", _fake_create_once)
    monkeypatch.setattr(user_onboarding.UsersRepo, "get_by_external_handle", _fake_get)
    monkeypatch.setattr(user_onboarding.UsersRepo, "fill_blank_fields", _fake_fill)
    session = _Session()

    await user_onboarding.UserOnboardingService.resolve_user(
        session,
        external_handle="@anna",
        display_name="Anna",
    )

    assert session.refreshed == []


@pytest.mark.asyncio
async def test_update_language_upper_cases_code(monkeypatch) -> None:
    captured: dict[str, object] = {}

    async def _fake_set_language(session, *, external_handle: str, language_code: str) -> int:
        captured["language_code"] = language_code
        return 1

    monkeypatch.setattr(user_onboarding.UsersRepo, "set_language", _fake_set_language)

    assert await user_onboarding.UserOnboardingService.update_language(
        object(),
        external_handle="@anna",
        language_code="uz",
    ) is True
    assert captured == {"language_code": "UZ"}
