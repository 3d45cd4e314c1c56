from __future__ import annotations

from collections import defaultdict

from app.vouchers.eligibility import aggregate_stats
from app.vouchers.store import VoucherStore
from app.vouchers.types import BroadcastTarget, EligibilityStats


def matches_filters(
    stats: EligibilityStats,
    *,
    eligible: bool | None,
    min_vouchers: int | None,
    max_remaining: int | None,
) -> bool:
    if stats.total_vouchers == 0:
        return False
    if eligible is not None:
        return stats.eligible is eligible
    if min_vouchers is not None and stats.total_vouchers < min_vouchers:
        return False
    if max_remaining is not None and stats.remaining_vouchers > max_remaining:
        return False
    return True


async def list_broadcast_targets(
    store: VoucherStore,
    *,
    eligible: bool | None = None,
    min_vouchers: int | None = None,
    max_remaining: int | None = None,
) -> list[BroadcastTarget]:
    campaign = await store.get_active_campaign()
    if campaign is None:
        return []

    rows_by_user: dict[int, list[tuple[int, str]]] = defaultdict(list)
    for user_id, brand_id, brand_name in await store.list_campaign_activations(campaign.id):
        rows_by_user[user_id].append((brand_id, brand_name))

    users = await store.list_users(list(rows_by_user))
    targets: list[BroadcastTarget] = []
    for user in sorted(users, key=lambda item: item.id):
        stats = aggregate_stats(rows_by_user[user.id], campaign=campaign)
        if not matches_filters(
            stats,
            eligible=eligible,
            min_vouchers=min_vouchers,
            max_remaining=max_remaining,
        ):
            continue
        targets.append(
            BroadcastTarget(
                user_id=user.id,
                external_handle=user.external_handle,
                language_code=user.language_code,
                stats=stats,
            )
        )
    return targets
