from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True, slots=True)
class BrandCount:
    brand: str
    count: int


@dataclass(frozen=True, slots=True)
class EligibilityStats:
    total_vouchers: int
    distinct_brand_count: int
    eligible: bool
    remaining_vouchers: int = 0
    remaining_brands: int = 0
    brands: tuple[BrandCount, ...] = ()
    campaign_id: int | None = None


@dataclass(frozen=True, slots=True)
class GeneratedVoucher:
    code: str
    campaign_title: str
    brand_name: str


@dataclass(frozen=True, slots=True)
class ActivationResult:
    code: str
    total_vouchers: int
    distinct_brand_count: int
    eligible: bool
    brands: tuple[BrandCount, ...] = ()


@dataclass(frozen=True, slots=True)
class WinnerConfirmation:
    code: str
    user_id: int | None


@dataclass(frozen=True, slots=True)
class UserSnapshot:
    user_id: int
    display_name: str | None
    phone: str | None
    external_handle: str


@dataclass(frozen=True, slots=True)
class VoucherSnapshot:
    found: bool
    code: str | None = None
    status: str | None = None
    brand: str | None = None
    campaign: str | None = None
    activated_at: datetime | None = None
    user: UserSnapshot | None = None
    stats: EligibilityStats | None = None


@dataclass(frozen=True, slots=True)
class BroadcastTarget:
    user_id: int
    external_handle: str
    language_code: str
    stats: EligibilityStats


@dataclass(slots=True)
class DashboardCounters:
    total_users: int
    total_vouchers: int
    activated_vouchers: int
    active_campaigns: int
    total_brands: int
    total_winners: int
    vouchers_by_status: dict[str, int] = field(default_factory=dict)
