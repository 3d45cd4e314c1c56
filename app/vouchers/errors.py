from app.vouchers.constants import (
    REASON_ALREADY_ACTIVATED,
    REASON_CAMPAIGN_EXPIRED,
    REASON_CAMPAIGN_INACTIVE,
    REASON_INVALID_CODE,
)


class VoucherError(Exception):
    pass


class VoucherActivationError(VoucherError):
    reason: str = ""


class InvalidCodeError(VoucherActivationError):
    reason = REASON_INVALID_CODE


class AlreadyActivatedError(VoucherActivationError):
    reason = REASON_ALREADY_ACTIVATED


class CampaignInactiveError(VoucherActivationError):
    reason = REASON_CAMPAIGN_INACTIVE


class CampaignExpiredError(VoucherActivationError):
    reason = REASON_CAMPAIGN_EXPIRED


ACTIVATION_ERRORS_BY_REASON: dict[str, type[VoucherActivationError]] = {
    error.reason: error
    for error in (
        InvalidCodeError,
        AlreadyActivatedError,
        CampaignInactiveError,
        CampaignExpiredError,
    )
}


class VoucherBatchSizeError(VoucherError, ValueError):
    pass


class VoucherCodeSpaceExhaustedError(VoucherError):
    pass


class VoucherNotFoundError(VoucherError):
    pass


class InvalidVoucherStateError(VoucherError):
    pass


class VoucherStorageUnavailableError(VoucherError):
    pass
