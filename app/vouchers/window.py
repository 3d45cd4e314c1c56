from __future__ import annotations

from datetime import datetime
from typing import Any

from app.vouchers.constants import REASON_CAMPAIGN_EXPIRED, REASON_CAMPAIGN_INACTIVE


def is_within_window(campaign: Any, now_utc: datetime) -> bool:
    return campaign.start_at <= now_utc <= campaign.end_at


def window_rejection_reason(campaign: Any, now_utc: datetime) -> str | None:
    if not campaign.is_active:
        return REASON_CAMPAIGN_INACTIVE
    if not is_within_window(campaign, now_utc):
        return REASON_CAMPAIGN_EXPIRED
    return None


def is_accepting_redemptions(campaign: Any, now_utc: datetime) -> bool:
    return window_rejection_reason(campaign, now_utc) is None
