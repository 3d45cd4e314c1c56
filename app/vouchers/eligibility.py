from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from typing import Any

from app.vouchers.store import VoucherStore
from app.vouchers.types import BrandCount, EligibilityStats


def empty_stats() -> EligibilityStats:
    return EligibilityStats(total_vouchers=0, distinct_brand_count=0, eligible=False)


def aggregate_stats(
    activated_brands: Iterable[tuple[int, str]],
    *,
    campaign: Any | None,
) -> EligibilityStats:
    """Fold a user's ACTIVATED (brand_id, brand_name) rows into a verdict for ``campaign``."""
    if campaign is None:
        return empty_stats()

    counts: Counter[int] = Counter()
    names: dict[int, str] = {}
    for brand_id, brand_name in activated_brands:
        counts[brand_id] += 1
        names[brand_id] = brand_name

    total_vouchers = sum(counts.values())
    distinct_brand_count = len(counts)
    remaining_vouchers = max(0, campaign.min_vouchers - total_vouchers)
    remaining_brands = max(0, campaign.min_brands - distinct_brand_count)
    brands = tuple(
        BrandCount(brand=names[brand_id], count=count)
        for brand_id, count in sorted(counts.items(), key=lambda item: (names[item[0]], item[0]))
    )
    return EligibilityStats(
        total_vouchers=total_vouchers,
        distinct_brand_count=distinct_brand_count,
        eligible=remaining_vouchers == 0 and remaining_brands == 0,
        remaining_vouchers=remaining_vouchers,
        remaining_brands=remaining_brands,
        brands=brands,
        campaign_id=campaign.id,
    )


async def compute_stats(
    store: VoucherStore,
    *,
    user_id: int,
    campaign: Any | None,
) -> EligibilityStats:
    if campaign is None:
        return empty_stats()
    rows = await store.list_activated_brands(user_id=user_id, campaign_id=campaign.id)
    return aggregate_stats(rows, campaign=campaign)


async def get_user_stats(
    store: VoucherStore,
    *,
    external_handle: str,
) -> tuple[Any, Any | None, EligibilityStats] | None:
    user = await store.find_user_by_handle(external_handle)
    if user is None:
        return None
    campaign = await store.get_active_campaign()
    stats = await compute_stats(store, user_id=user.id, campaign=campaign)
    return user, campaign, stats
