from __future__ import annotations

from datetime import datetime

import structlog

from app.vouchers.audit import record_activation_failure, record_activation_success
from app.vouchers.codes import normalize_code
from app.vouchers.eligibility import compute_stats
from app.vouchers.errors import InvalidCodeError, VoucherActivationError
from app.vouchers.state_machine import activate_voucher
from app.vouchers.store import VoucherStore
from app.vouchers.types import ActivationResult

logger = structlog.get_logger(__name__)


async def activate(
    store: VoucherStore,
    *,
    user_id: int,
    external_handle: str,
    code: str,
    now_utc: datetime,
) -> ActivationResult:
    """Claim a FREE voucher for ``user_id``.

    Every guard fires before the voucher is written, so on a rejection the
    caller can commit the transaction to keep the failure audit entry.
    """
    normalized_code = normalize_code(code)

    try:
        if not normalized_code:
            raise InvalidCodeError
        voucher = await store.lock_voucher_by_code(normalized_code)
        if voucher is None:
            raise InvalidCodeError
        campaign = await store.get_campaign(voucher.campaign_id)
        await activate_voucher(
            store,
            voucher,
            campaign=campaign,
            user_id=user_id,
            now_utc=now_utc,
        )
    except VoucherActivationError as exc:
        await record_activation_failure(
            store,
            external_handle=external_handle,
            code=normalized_code or code,
            reason=exc.reason,
            now_utc=now_utc,
        )
        raise

    await record_activation_success(
        store,
        external_handle=external_handle,
        code=normalized_code,
        now_utc=now_utc,
    )
    stats = await compute_stats(store, user_id=user_id, campaign=campaign)
    logger.info(
        "voucher_activated",
        external_handle=external_handle,
        code=normalized_code,
        campaign_id=campaign.id,
        total_vouchers=stats.total_vouchers,
        distinct_brand_count=stats.distinct_brand_count,
        eligible=stats.eligible,
    )
    return ActivationResult(
        code=normalized_code,
        total_vouchers=stats.total_vouchers,
        distinct_brand_count=stats.distinct_brand_count,
        eligible=stats.eligible,
        brands=stats.brands,
    )
