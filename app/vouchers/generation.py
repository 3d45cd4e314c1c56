from __future__ import annotations

from datetime import datetime

import structlog

from app.campaigns.errors import BrandNotFoundError, CampaignNotFoundError
from app.vouchers.codes import draw_code
from app.vouchers.errors import VoucherBatchSizeError, VoucherCodeSpaceExhaustedError
from app.vouchers.store import VoucherStore
from app.vouchers.types import GeneratedVoucher

logger = structlog.get_logger(__name__)


async def _insert_unique_code(
    store: VoucherStore,
    *,
    campaign_id: int,
    brand_id: int,
    code_length: int,
    max_draws: int,
    drawn_in_batch: set[str],
    now_utc: datetime,
) -> tuple[str, int]:
    collisions = 0
    for _ in range(max_draws):
        code = draw_code(code_length)
        if code in drawn_in_batch or await store.code_exists(code):
            collisions += 1
            continue

        # A concurrent batch may have inserted the same code since the check.
        voucher = await store.insert_voucher(
            code=code,
            campaign_id=campaign_id,
            brand_id=brand_id,
            now_utc=now_utc,
        )
        if voucher is None:
            collisions += 1
            continue

        drawn_in_batch.add(code)
        return code, collisions

    raise VoucherCodeSpaceExhaustedError(f"no free code after {max_draws} draws")


async def generate_batch(
    store: VoucherStore,
    *,
    campaign_id: int,
    brand_id: int,
    count: int,
    now_utc: datetime,
    code_length: int,
    max_count: int,
    max_draws: int,
) -> list[GeneratedVoucher]:
    if count <= 0 or count > max_count:
        raise VoucherBatchSizeError(f"count must be in range 1..{max_count}")

    campaign = await store.get_campaign(campaign_id)
    if campaign is None:
        raise CampaignNotFoundError(campaign_id)
    brand = await store.get_brand(brand_id)
    if brand is None:
        raise BrandNotFoundError(brand_id)

    drawn_in_batch: set[str] = set()
    generated: list[GeneratedVoucher] = []
    collisions_total = 0
    for _ in range(count):
        code, collisions = await _insert_unique_code(
            store,
            campaign_id=campaign_id,
            brand_id=brand_id,
            code_length=code_length,
            max_draws=max_draws,
            drawn_in_batch=drawn_in_batch,
            now_utc=now_utc,
        )
        collisions_total += collisions
        generated.append(
            GeneratedVoucher(
                code=code,
                campaign_title=campaign.title,
                brand_name=brand.name,
            )
        )

    logger.info(
        "voucher_batch_generated",
        campaign_id=campaign_id,
        brand_id=brand_id,
        count=len(generated),
        collisions=collisions_total,
    )
    return generated
