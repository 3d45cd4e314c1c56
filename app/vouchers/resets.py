from __future__ import annotations

from datetime import datetime

import structlog

from app.vouchers.codes import normalize_code
from app.vouchers.errors import VoucherNotFoundError
from app.vouchers.state_machine import void_voucher
from app.vouchers.store import VoucherStore

logger = structlog.get_logger(__name__)


async def reset_user_vouchers(store: VoucherStore, *, user_id: int, now_utc: datetime) -> int:
    vouchers = await store.lock_activated_vouchers_for_user(user_id)
    for voucher in vouchers:
        await void_voucher(store, voucher, now_utc=now_utc)

    logger.info("voucher_user_reset", user_id=user_id, reset=len(vouchers))
    return len(vouchers)


async def reset_voucher(store: VoucherStore, *, code: str, now_utc: datetime) -> None:
    normalized_code = normalize_code(code)
    voucher = await store.lock_voucher_by_code(normalized_code)
    if voucher is None:
        raise VoucherNotFoundError(normalized_code)

    await void_voucher(store, voucher, now_utc=now_utc)
    logger.info(
        "voucher_reset",
        code=normalized_code,
        voucher_id=voucher.id,
        user_id=voucher.user_id,
    )
