from __future__ import annotations

from datetime import datetime

import structlog

from app.vouchers.codes import normalize_code
from app.vouchers.errors import VoucherNotFoundError
from app.vouchers.state_machine import mark_voucher_used
from app.vouchers.store import VoucherStore
from app.vouchers.types import WinnerConfirmation

logger = structlog.get_logger(__name__)


async def confirm_winner(
    store: VoucherStore,
    *,
    code: str,
    now_utc: datetime,
) -> WinnerConfirmation:
    """Promote an ACTIVATED voucher to USED and record its Winner row.

    Both writes share the caller's transaction; the voucher row lock makes a
    second confirmation observe USED and fail with ``InvalidVoucherStateError``.
    """
    normalized_code = normalize_code(code)
    voucher = await store.lock_voucher_by_code(normalized_code)
    if voucher is None:
        raise VoucherNotFoundError(normalized_code)

    await mark_voucher_used(store, voucher, now_utc=now_utc)
    await store.insert_winner(voucher_id=voucher.id, now_utc=now_utc)

    logger.info(
        "voucher_winner_confirmed",
        code=normalized_code,
        voucher_id=voucher.id,
        user_id=voucher.user_id,
    )
    return WinnerConfirmation(code=normalized_code, user_id=voucher.user_id)
