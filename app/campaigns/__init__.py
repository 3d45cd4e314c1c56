from app.campaigns.brands import BrandService
from app.campaigns.service import CampaignService

__all__ = ["BrandService", "CampaignService"]
