CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"

VOUCHER_STATUS_FREE = "FREE"
VOUCHER_STATUS_ACTIVATED = "ACTIVATED"
VOUCHER_STATUS_USED = "USED"
VOUCHER_STATUS_DELETED = "DELETED"

VOUCHER_STATUSES = frozenset(
    {
        VOUCHER_STATUS_FREE,
        VOUCHER_STATUS_ACTIVATED,
        VOUCHER_STATUS_USED,
        VOUCHER_STATUS_DELETED,
    }
)

# (from_status, to_status)
VOUCHER_ALLOWED_TRANSITIONS = frozenset(
    {
        (VOUCHER_STATUS_FREE, VOUCHER_STATUS_ACTIVATED),
        (VOUCHER_STATUS_ACTIVATED, VOUCHER_STATUS_USED),
        (VOUCHER_STATUS_ACTIVATED, VOUCHER_STATUS_DELETED),
    }
)

REASON_INVALID_CODE = "INVALID_CODE"
REASON_ALREADY_ACTIVATED = "ALREADY_ACTIVATED"
REASON_CAMPAIGN_INACTIVE = "CAMPAIGN_INACTIVE"
REASON_CAMPAIGN_EXPIRED = "CAMPAIGN_EXPIRED"
