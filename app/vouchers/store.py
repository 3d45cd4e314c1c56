from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Any, Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.activation_logs import ActivationLog
from app.db.models.winners import Winner
from app.db.repo.activation_logs_repo import ActivationLogsRepo
from app.db.repo.brands_repo import BrandsRepo
from app.db.repo.campaigns_repo import CampaignsRepo
from app.db.repo.users_repo import UsersRepo
from app.db.repo.vouchers_repo import VouchersRepo
from app.db.repo.winners_repo import WinnersRepo
from app.services.user_onboarding import UserOnboardingService
from app.vouchers.types import DashboardCounters


class VoucherStore(Protocol):
    """Storage port used by the voucher rules.

    Campaign, brand, voucher and user values are duck-typed records exposing the
    attributes of the corresponding ORM models.
    """

    async def get_campaign(self, campaign_id: int) -> Any | None: ...

    async def get_active_campaign(self) -> Any | None: ...

    async def get_brand(self, brand_id: int) -> Any | None: ...

    async def code_exists(self, code: str) -> bool: ...

    async def insert_voucher(
        self,
        *,
        code: str,
        campaign_id: int,
        brand_id: int,
        now_utc: datetime,
    ) -> Any | None: ...

    async def find_voucher_by_code(self, code: str) -> Any | None: ...

    async def lock_voucher_by_code(self, code: str) -> Any | None: ...

    async def lock_activated_vouchers_for_user(self, user_id: int) -> list[Any]: ...

    async def transition_voucher(
        self,
        voucher: Any,
        *,
        status: str,
        user_id: int | None,
        activated_at: datetime | None,
        now_utc: datetime,
    ) -> None: ...

    async def resolve_user(
        self,
        *,
        external_handle: str,
        display_name: str | None,
        phone: str | None,
    ) -> Any: ...

    async def get_user(self, user_id: int) -> Any | None: ...

    async def find_user_by_handle(self, external_handle: str) -> Any | None: ...

    async def list_users(self, user_ids: Sequence[int]) -> list[Any]: ...

    async def insert_winner(self, *, voucher_id: int, now_utc: datetime) -> None: ...

    async def list_activated_brands(
        self,
        *,
        user_id: int,
        campaign_id: int,
    ) -> list[tuple[int, str]]: ...

    async def list_campaign_activations(self, campaign_id: int) -> list[tuple[int, int, str]]: ...

    async def append_activation_log(
        self,
        *,
        external_handle: str | None,
        code: str,
        success: bool,
        reason: str | None,
        now_utc: datetime,
    ) -> None: ...

    async def dashboard_counters(self) -> DashboardCounters: ...


class SqlVoucherStore:
    """PostgreSQL adapter of the storage port bound to one open transaction."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_campaign(self, campaign_id: int):
        return await CampaignsRepo.get_by_id(self.session, campaign_id)

    async def get_active_campaign(self):
        return await CampaignsRepo.get_active(self.session)

    async def get_brand(self, brand_id: int):
        return await BrandsRepo.get_by_id(self.session, brand_id)

    async def code_exists(self, code: str) -> bool:
        return await VouchersRepo.code_exists(self.session, code)

    async def insert_voucher(
        self,
        *,
        code: str,
        campaign_id: int,
        brand_id: int,
        now_utc: datetime,
    ):
        return await VouchersRepo.create_once(
            self.session,
            code=code,
            campaign_id=campaign_id,
            brand_id=brand_id,
            created_at=now_utc,
        )

    async def find_voucher_by_code(self, code: str):
        return await VouchersRepo.get_by_code(self.session, code)

    async def lock_voucher_by_code(self, code: str):
        return await VouchersRepo.get_by_code_for_update(self.session, code)

    async def lock_activated_vouchers_for_user(self, user_id: int) -> list:
        return await VouchersRepo.list_activated_for_user_for_update(self.session, user_id=user_id)

    async def transition_voucher(
        self,
        voucher,
        *,
        status: str,
        user_id: int | None,
        activated_at: datetime | None,
        now_utc: datetime,
    ) -> None:
        voucher.status = status
        voucher.user_id = user_id
        voucher.activated_at = activated_at
        voucher.updated_at = now_utc
        await self.session.flush()

    async def resolve_user(
        self,
        *,
        external_handle: str,
        display_name: str | None,
        phone: str | None,
    ):
        return await UserOnboardingService.resolve_user(
            self.session,
            external_handle=external_handle,
            display_name=display_name,
            phone=phone,
        )

    async def get_user(self, user_id: int):
        return await UsersRepo.get_by_id(self.session, user_id)

    async def find_user_by_handle(self, external_handle: str):
        return await UsersRepo.get_by_external_handle(self.session, external_handle)

    async def list_users(self, user_ids: Sequence[int]) -> list:
        return await UsersRepo.list_by_ids(self.session, user_ids)

    async def insert_winner(self, *, voucher_id: int, now_utc: datetime) -> None:
        await WinnersRepo.create(
            self.session,
            winner=Winner(voucher_id=voucher_id, created_at=now_utc),
        )

    async def list_activated_brands(
        self,
        *,
        user_id: int,
        campaign_id: int,
    ) -> list[tuple[int, str]]:
        return await VouchersRepo.list_activated_brands_for_user(
            self.session,
            user_id=user_id,
            campaign_id=campaign_id,
        )

    async def list_campaign_activations(self, campaign_id: int) -> list[tuple[int, int, str]]:
        return await VouchersRepo.list_activated_brands_for_campaign(
            self.session,
            campaign_id=campaign_id,
        )

    async def append_activation_log(
        self,
        *,
        external_handle: str | None,
        code: str,
        success: bool,
        reason: str | None,
        now_utc: datetime,
    ) -> None:
        await ActivationLogsRepo.create(
            self.session,
            entry=ActivationLog(
                external_handle=external_handle,
                code=code,
                success=success,
                reason=reason,
                created_at=now_utc,
            ),
        )

    async def dashboard_counters(self) -> DashboardCounters:
        by_status = await VouchersRepo.count_by_status(self.session)
        return DashboardCounters(
            total_users=await UsersRepo.count_all(self.session),
            total_vouchers=sum(by_status.values()),
            activated_vouchers=by_status.get("ACTIVATED", 0),
            active_campaigns=await CampaignsRepo.count_active(self.session),
            total_brands=await BrandsRepo.count_all(self.session),
            total_winners=await WinnersRepo.count_all(self.session),
            vouchers_by_status=by_status,
        )
