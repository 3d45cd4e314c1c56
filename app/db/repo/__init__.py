from app.db.repo.activation_logs_repo import ActivationLogsRepo
from app.db.repo.brands_repo import BrandsRepo
from app.db.repo.campaigns_repo import CampaignsRepo
from app.db.repo.users_repo import UsersRepo
from app.db.repo.vouchers_repo import VouchersRepo
from app.db.repo.winners_repo import WinnersRepo

__all__ = [
    "ActivationLogsRepo",
    "BrandsRepo",
    "CampaignsRepo",
    "UsersRepo",
    "VouchersRepo",
    "WinnersRepo",
]
