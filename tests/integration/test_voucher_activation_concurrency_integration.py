from __future__ import annotations

import asyncio
from datetime import datetime

import pytest
from sqlalchemy import func, select

from app.db.models.activation_logs import ActivationLog
from app.db.models.users import User
from app.db.repo.activation_logs_repo import ActivationLogsRepo
from app.db.repo.users_repo import UsersRepo
from app.db.repo.vouchers_repo import VouchersRepo
from app.db.session import SessionLocal
from app.vouchers.errors import AlreadyActivatedError, InvalidCodeError
from app.vouchers.service import VoucherService
from tests.integration.voucher_fixtures import UTC, _create_brand, _create_campaign, _generate_codes


@pytest.mark.asyncio
async def test_parallel_activation_allows_only_one_owner() -> None:
    now_utc = datetime.now(UTC)
    campaign_id = await _create_campaign(now_utc=now_utc)
    brand_id = await _create_brand("Race Brand")
    [code] = await _generate_codes(campaign_id=campaign_id, brand_id=brand_id, count=1, now_utc=now_utc)
    barrier = asyncio.Event()

    async def _attempt(handle: str) -> str:
        await barrier.wait()
        try:
            await VoucherService.activate(external_handle=handle, code=code, now_utc=now_utc)
        except AlreadyActivatedError:
            return "already_activated"
        return "activated"

    tasks = [asyncio.create_task(_attempt(f"@racer{index}")) for index in range(4)]
    barrier.set()
    outcomes = await asyncio.gather(*tasks)

    assert sorted(outcomes) == ["activated"] + ["already_activated"] * 3

    async with SessionLocal.begin() as session:
        voucher = await VouchersRepo.get_by_code(session, code)
        assert voucher is not None
        assert voucher.status == "ACTIVATED"
        owner = await session.get(User, voucher.user_id)
        logs = await ActivationLogsRepo.list_for_code(session, code)

    assert owner is not None
    assert sum(1 for entry in logs if entry.success) == 1
    assert sorted(entry.reason for entry in logs if not entry.success) == ["ALREADY_ACTIVATED"] * 3
    assert {entry.external_handle for entry in logs if entry.success} == {owner.external_handle}


@pytest.mark.asyncio
async def test_failed_activation_keeps_audit_entry_and_new_user() -> None:
    now_utc = datetime.now(UTC)
    await _create_campaign(now_utc=now_utc)

    with pytest.raises(InvalidCodeError):
        await VoucherService.activate(
            external_handle="@ghost",
            code="zzzz-zzz",
            display_name="Ghost",
            now_utc=now_utc,
        )

    async with SessionLocal.begin() as session:
        logs = await ActivationLogsRepo.list_for_code(session, "ZZZZZZZ")
        ghost = await UsersRepo.get_by_external_handle(session, "@ghost")
        logs_total = await session.scalar(select(func.count(ActivationLog.id)))

    assert [(entry.external_handle, entry.success, entry.reason) for entry in logs] == [
        ("@ghost", False, "INVALID_CODE")
    ]
    assert ghost is not None
    assert ghost.display_name == "Ghost"
    assert logs_total == 1


@pytest.mark.asyncio
async def test_same_handle_activates_two_codes_in_parallel() -> None:
    now_utc = datetime.now(UTC)
    campaign_id = await _create_campaign(now_utc=now_utc)
    alfa_id = await _create_brand("Parallel Alfa")
    beta_id = await _create_brand("Parallel Beta")
    [alfa_code] = await _generate_codes(campaign_id=campaign_id, brand_id=alfa_id, count=1, now_utc=now_utc)
    [beta_code] = await _generate_codes(campaign_id=campaign_id, brand_id=beta_id, count=1, now_utc=now_utc)

    results = await asyncio.wait_for(
        asyncio.gather(
            VoucherService.activate(external_handle="@twin", code=alfa_code, display_name="Twin", now_utc=now_utc),
            VoucherService.activate(external_handle="@twin", code=beta_code, phone="+100", now_utc=now_utc),
        ),
        timeout=10,
    )

    assert sorted(result.code for result in results) == sorted([alfa_code, beta_code])
    async with SessionLocal.begin() as session:
        twin = await UsersRepo.get_by_external_handle(session, "@twin")
        alfa = await VouchersRepo.get_by_code(session, alfa_code)
        beta = await VouchersRepo.get_by_code(session, beta_code)

    assert twin is not None
    assert (twin.display_name, twin.phone) == ("Twin", "+100")
    assert (alfa.status, beta.status) == ("ACTIVATED", "ACTIVATED")
    assert alfa.user_id == beta.user_id == twin.id


@pytest.mark.asyncio
async def test_many_parallel_rejections_do_not_exhaust_the_pool() -> None:
    now_utc = datetime.now(UTC)
    await _create_campaign(now_utc=now_utc)

    async def _attempt(index: int) -> str:
        try:
            await VoucherService.activate(external_handle=f"@miss{index}", code="NOPE234", now_utc=now_utc)
        except InvalidCodeError as exc:
            return exc.reason
        return "activated"

    outcomes = await asyncio.wait_for(asyncio.gather(*(_attempt(index) for index in range(40))), timeout=30)

    assert outcomes == ["INVALID_CODE"] * 40
    async with SessionLocal.begin() as session:
        logs = await ActivationLogsRepo.list_for_code(session, "NOPE234")
    assert len(logs) == 40


@pytest.mark.asyncio
async def test_generated_batch_codes_are_unique_and_free() -> None:
    now_utc = datetime.now(UTC)
    campaign_id = await _create_campaign(now_utc=now_utc)
    brand_id = await _create_brand("Bulk Brand")

    first, second = await asyncio.gather(
        _generate_codes(campaign_id=campaign_id, brand_id=brand_id, count=200, now_utc=now_utc),
        _generate_codes(campaign_id=campaign_id, brand_id=brand_id, count=200, now_utc=now_utc),
    )

    assert len(set(first) | set(second)) == 400
    async with SessionLocal.begin() as session:
        by_status = await VouchersRepo.count_by_status(session)
    assert by_status == {"FREE": 400}
