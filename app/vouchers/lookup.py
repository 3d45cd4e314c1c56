from __future__ import annotations

from app.vouchers.codes import normalize_code
from app.vouchers.eligibility import compute_stats
from app.vouchers.store import VoucherStore
from app.vouchers.types import UserSnapshot, VoucherSnapshot


async def check_code(store: VoucherStore, *, code: str) -> VoucherSnapshot:
    normalized_code = normalize_code(code)
    if not normalized_code:
        return VoucherSnapshot(found=False)

    voucher = await store.find_voucher_by_code(normalized_code)
    if voucher is None:
        return VoucherSnapshot(found=False)

    campaign = await store.get_campaign(voucher.campaign_id)
    brand = await store.get_brand(voucher.brand_id)

    user_snapshot = None
    stats = None
    if voucher.user_id is not None:
        user = await store.get_user(voucher.user_id)
        if user is not None:
            user_snapshot = UserSnapshot(
                user_id=user.id,
                display_name=user.display_name,
                phone=user.phone,
                external_handle=user.external_handle,
            )
            # Scoped to the voucher's own campaign, even after it has ended.
            stats = await compute_stats(store, user_id=user.id, campaign=campaign)

    return VoucherSnapshot(
        found=True,
        code=voucher.code,
        status=voucher.status,
        brand=brand.name if brand is not None else None,
        campaign=campaign.title if campaign is not None else None,
        activated_at=voucher.activated_at,
        user=user_snapshot,
        stats=stats,
    )
