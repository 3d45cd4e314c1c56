from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Protocol

import structlog
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from app.core.config import get_settings
from app.db.session import SessionLocal
from app.vouchers.activation import activate
from app.vouchers.eligibility import compute_stats, get_user_stats
from app.vouchers.errors import VoucherActivationError, VoucherStorageUnavailableError
from app.vouchers.generation import generate_batch
from app.vouchers.lookup import check_code
from app.vouchers.resets import reset_user_vouchers, reset_voucher
from app.vouchers.store import SqlVoucherStore
from app.vouchers.targeting import list_broadcast_targets
from app.vouchers.types import (
    ActivationResult,
    BroadcastTarget,
    DashboardCounters,
    EligibilityStats,
    GeneratedVoucher,
    VoucherSnapshot,
    WinnerConfirmation,
)
from app.vouchers.winners import confirm_winner

logger = structlog.get_logger(__name__)

STORAGE_FAILURES = (OperationalError, InterfaceError, PoolTimeoutError, OSError)


class _SessionFactory(Protocol):
    def begin(self): ...


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@asynccontextmanager
async def _unit_of_work(
    session_local: _SessionFactory,
    *,
    operation: str,
) -> AsyncIterator[SqlVoucherStore]:
    try:
        async with session_local.begin() as session:
            yield SqlVoucherStore(session)
    except STORAGE_FAILURES as exc:
        logger.error(
            "voucher_storage_unavailable",
            operation=operation,
            error_type=type(exc).__name__,
        )
        raise VoucherStorageUnavailableError(operation) from exc


class VoucherService:
    """Entry points for the bot front-end and the admin surface.

    Each call runs in its own transaction; ``activate`` uses two. Business
    failures surface as ``VoucherError`` subclasses, a missing campaign or brand
    as the ``app.campaigns.errors`` ones. Storage outages raise
    ``VoucherStorageUnavailableError`` and are safe to retry.
    """

    @staticmethod
    async def generate_batch(
        *,
        campaign_id: int,
        brand_id: int,
        count: int,
        now_utc: datetime | None = None,
        session_local: _SessionFactory = SessionLocal,
    ) -> list[GeneratedVoucher]:
        settings = get_settings()
        async with _unit_of_work(session_local, operation="generate_batch") as store:
            return await generate_batch(
                store,
                campaign_id=campaign_id,
                brand_id=brand_id,
                count=count,
                now_utc=now_utc or _utcnow(),
                code_length=settings.voucher_code_length,
                max_count=settings.voucher_batch_max_count,
                max_draws=settings.voucher_code_max_draws,
            )

    @staticmethod
    async def activate(
        *,
        external_handle: str,
        code: str,
        display_name: str | None = None,
        phone: str | None = None,
        now_utc: datetime | None = None,
        session_local: _SessionFactory = SessionLocal,
    ) -> ActivationResult:
        """Register the user, then claim the voucher.

        The user is committed on its own so a rejected attempt still leaves the
        account behind. A rejection commits its audit entry before re-raising.
        """
        async with _unit_of_work(session_local, operation="resolve_user") as store:
            user = await store.resolve_user(
                external_handle=external_handle,
                display_name=display_name,
                phone=phone,
            )

        async with _unit_of_work(session_local, operation="activate") as store:
            try:
                return await activate(
                    store,
                    user_id=user.id,
                    external_handle=external_handle,
                    code=code,
                    now_utc=now_utc or _utcnow(),
                )
            except VoucherActivationError as exc:
                rejection = exc
        raise rejection

    @staticmethod
    async def confirm_winner(
        *,
        code: str,
        now_utc: datetime | None = None,
        session_local: _SessionFactory = SessionLocal,
    ) -> WinnerConfirmation:
        async with _unit_of_work(session_local, operation="confirm_winner") as store:
            return await confirm_winner(store, code=code, now_utc=now_utc or _utcnow())

    @staticmethod
    async def check_code(
        *,
        code: str,
        session_local: _SessionFactory = SessionLocal,
    ) -> VoucherSnapshot:
        async with _unit_of_work(session_local, operation="check_code") as store:
            return await check_code(store, code=code)

    @staticmethod
    async def compute_stats(
        *,
        user_id: int,
        campaign_id: int,
        session_local: _SessionFactory = SessionLocal,
    ) -> EligibilityStats:
        async with _unit_of_work(session_local, operation="compute_stats") as store:
            campaign = await store.get_campaign(campaign_id)
            return await compute_stats(store, user_id=user_id, campaign=campaign)

    @staticmethod
    async def get_user_stats(
        *,
        external_handle: str,
        session_local: _SessionFactory = SessionLocal,
    ) -> EligibilityStats | None:
        async with _unit_of_work(session_local, operation="get_user_stats") as store:
            resolved = await get_user_stats(store, external_handle=external_handle)
        if resolved is None:
            return None
        _, _, stats = resolved
        return stats

    @staticmethod
    async def reset_user_vouchers(
        *,
        user_id: int,
        now_utc: datetime | None = None,
        session_local: _SessionFactory = SessionLocal,
    ) -> int:
        async with _unit_of_work(session_local, operation="reset_user_vouchers") as store:
            return await reset_user_vouchers(store, user_id=user_id, now_utc=now_utc or _utcnow())

    @staticmethod
    async def reset_voucher(
        *,
        code: str,
        now_utc: datetime | None = None,
        session_local: _SessionFactory = SessionLocal,
    ) -> None:
        async with _unit_of_work(session_local, operation="reset_voucher") as store:
            await reset_voucher(store, code=code, now_utc=now_utc or _utcnow())

    @staticmethod
    async def list_broadcast_targets(
        *,
        eligible: bool | None = None,
        min_vouchers: int | None = None,
        max_remaining: int | None = None,
        session_local: _SessionFactory = SessionLocal,
    ) -> list[BroadcastTarget]:
        async with _unit_of_work(session_local, operation="list_broadcast_targets") as store:
            return await list_broadcast_targets(
                store,
                eligible=eligible,
                min_vouchers=min_vouchers,
                max_remaining=max_remaining,
            )

    @staticmethod
    async def dashboard_counters(
        *,
        session_local: _SessionFactory = SessionLocal,
    ) -> DashboardCounters:
        async with _unit_of_work(session_local, operation="dashboard_counters") as store:
            return await store.dashboard_counters()
