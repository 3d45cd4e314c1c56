from __future__ import annotations

from datetime import datetime

import structlog

from app.vouchers.store import VoucherStore

logger = structlog.get_logger(__name__)


async def record_activation_success(
    store: VoucherStore,
    *,
    external_handle: str | None,
    code: str,
    now_utc: datetime,
) -> None:
    await store.append_activation_log(
        external_handle=external_handle,
        code=code,
        success=True,
        reason=None,
        now_utc=now_utc,
    )


async def record_activation_failure(
    store: VoucherStore,
    *,
    external_handle: str | None,
    code: str,
    reason: str,
    now_utc: datetime,
) -> None:
    await store.append_activation_log(
        external_handle=external_handle,
        code=code,
        success=False,
        reason=reason,
        now_utc=now_utc,
    )
    logger.info(
        "voucher_activation_rejected",
        external_handle=external_handle,
        code=code,
        reason=reason,
    )
