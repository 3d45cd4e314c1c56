"""Voucher lifecycle transitions.

FREE -> ACTIVATED (redemption), ACTIVATED -> USED (winner confirmation) and
ACTIVATED -> DELETED (administrative reset). USED and DELETED are terminal.
Every guard runs before the store is touched, so a rejected transition leaves
the voucher unchanged.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from app.vouchers.constants import (
    VOUCHER_ALLOWED_TRANSITIONS,
    VOUCHER_STATUS_ACTIVATED,
    VOUCHER_STATUS_DELETED,
    VOUCHER_STATUS_USED,
)
from app.vouchers.errors import (
    ACTIVATION_ERRORS_BY_REASON,
    AlreadyActivatedError,
    InvalidVoucherStateError,
)
from app.vouchers.store import VoucherStore
from app.vouchers.window import window_rejection_reason


def can_transition(from_status: str, to_status: str) -> bool:
    return (from_status, to_status) in VOUCHER_ALLOWED_TRANSITIONS


async def activate_voucher(
    store: VoucherStore,
    voucher: Any,
    *,
    campaign: Any,
    user_id: int,
    now_utc: datetime,
) -> None:
    if not can_transition(voucher.status, VOUCHER_STATUS_ACTIVATED):
        raise AlreadyActivatedError
    reason = window_rejection_reason(campaign, now_utc)
    if reason is not None:
        raise ACTIVATION_ERRORS_BY_REASON[reason]

    await store.transition_voucher(
        voucher,
        status=VOUCHER_STATUS_ACTIVATED,
        user_id=user_id,
        activated_at=now_utc,
        now_utc=now_utc,
    )


async def mark_voucher_used(store: VoucherStore, voucher: Any, *, now_utc: datetime) -> None:
    if not can_transition(voucher.status, VOUCHER_STATUS_USED):
        raise InvalidVoucherStateError(voucher.status)

    await store.transition_voucher(
        voucher,
        status=VOUCHER_STATUS_USED,
        user_id=voucher.user_id,
        activated_at=voucher.activated_at,
        now_utc=now_utc,
    )


async def void_voucher(store: VoucherStore, voucher: Any, *, now_utc: datetime) -> None:
    if not can_transition(voucher.status, VOUCHER_STATUS_DELETED):
        raise InvalidVoucherStateError(voucher.status)

    # Owner stays for history; only ACTIVATED rows count towards eligibility.
    await store.transition_voucher(
        voucher,
        status=VOUCHER_STATUS_DELETED,
        user_id=voucher.user_id,
        activated_at=None,
        now_utc=now_utc,
    )
