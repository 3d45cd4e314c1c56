from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.campaigns.errors import (
    CampaignInUseError,
    CampaignNotFoundError,
    CampaignThresholdError,
    CampaignWindowError,
)
from app.db.models.campaigns import Campaign
from app.db.repo.campaigns_repo import CampaignsRepo
from app.db.repo.vouchers_repo import VouchersRepo

logger = structlog.get_logger(__name__)

_UNSET = object()


@dataclass(slots=True)
class CampaignDraft:
    title: str
    start_at: datetime
    end_at: datetime
    description: str | None = None
    sum_per_unit: int | None = None
    min_vouchers: int = 1
    min_brands: int = 1
    is_active: bool = True


def validate_window(start_at: datetime, end_at: datetime) -> None:
    if start_at >= end_at:
        raise CampaignWindowError("start_at must be before end_at")


def validate_thresholds(*, min_vouchers: int, min_brands: int) -> None:
    if min_vouchers < 1 or min_brands < 1:
        raise CampaignThresholdError("thresholds must be >= 1")


class CampaignService:
    """Administrator-owned campaign reference data. Campaigns are never deleted."""

    @staticmethod
    async def create_campaign(
        session: AsyncSession,
        *,
        draft: CampaignDraft,
        now_utc: datetime | None = None,
    ) -> Campaign:
        now_utc = now_utc or datetime.now(timezone.utc)
        validate_window(draft.start_at, draft.end_at)
        validate_thresholds(min_vouchers=draft.min_vouchers, min_brands=draft.min_brands)

        campaign = await CampaignsRepo.create(
            session,
            campaign=Campaign(
                title=draft.title,
                description=draft.description,
                start_at=draft.start_at,
                end_at=draft.end_at,
                sum_per_unit=draft.sum_per_unit,
                min_vouchers=draft.min_vouchers,
                min_brands=draft.min_brands,
                is_active=draft.is_active,
                created_at=now_utc,
                updated_at=now_utc,
            ),
        )
        logger.info("campaign_created", campaign_id=campaign.id, title=campaign.title)
        return campaign

    @staticmethod
    async def update_campaign(
        session: AsyncSession,
        *,
        campaign_id: int,
        title: str | None = None,
        description: object = _UNSET,
        start_at: datetime | None = None,
        end_at: datetime | None = None,
        min_vouchers: int | None = None,
        min_brands: int | None = None,
        is_active: bool | None = None,
        now_utc: datetime | None = None,
    ) -> Campaign:
        campaign = await CampaignsRepo.get_by_id_for_update(session, campaign_id)
        if campaign is None:
            raise CampaignNotFoundError(campaign_id)

        # once vouchers exist only the active flag and thresholds may change
        edits_frozen_fields = description is not _UNSET or any(
            value is not None for value in (title, start_at, end_at)
        )
        if edits_frozen_fields and await VouchersRepo.count_by_campaign(session, campaign_id) > 0:
            raise CampaignInUseError(campaign_id)

        resolved_start = start_at or campaign.start_at
        resolved_end = end_at or campaign.end_at
        validate_window(resolved_start, resolved_end)
        resolved_min_vouchers = min_vouchers if min_vouchers is not None else campaign.min_vouchers
        resolved_min_brands = min_brands if min_brands is not None else campaign.min_brands
        validate_thresholds(min_vouchers=resolved_min_vouchers, min_brands=resolved_min_brands)

        if title is not None:
            campaign.title = title
        if description is not _UNSET:
            campaign.description = description  # type: ignore[assignment]
        campaign.start_at = resolved_start
        campaign.end_at = resolved_end
        campaign.min_vouchers = resolved_min_vouchers
        campaign.min_brands = resolved_min_brands
        if is_active is not None:
            campaign.is_active = is_active
        campaign.updated_at = now_utc or datetime.now(timezone.utc)
        await session.flush()

        logger.info(
            "campaign_updated",
            campaign_id=campaign.id,
            is_active=campaign.is_active,
            min_vouchers=campaign.min_vouchers,
            min_brands=campaign.min_brands,
        )
        return campaign

    @staticmethod
    async def deactivate_campaign(
        session: AsyncSession,
        *,
        campaign_id: int,
        now_utc: datetime | None = None,
    ) -> Campaign:
        return await CampaignService.update_campaign(
            session,
            campaign_id=campaign_id,
            is_active=False,
            now_utc=now_utc,
        )

    @staticmethod
    async def get_active_campaign(session: AsyncSession) -> Campaign | None:
        return await CampaignsRepo.get_active(session)

    @staticmethod
    async def list_campaigns(session: AsyncSession, *, limit: int = 100) -> list[Campaign]:
        return await CampaignsRepo.list_all(session, limit=limit)
