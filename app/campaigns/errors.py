class CampaignAdminError(Exception):
    pass


class CampaignNotFoundError(CampaignAdminError):
    pass


class CampaignWindowError(CampaignAdminError, ValueError):
    pass


class CampaignThresholdError(CampaignAdminError, ValueError):
    pass


class BrandNotFoundError(CampaignAdminError):
    pass


class BrandSlugConflictError(CampaignAdminError):
    pass


class BrandInUseError(CampaignAdminError):
    pass


class CampaignInUseError(CampaignAdminError):
    pass
