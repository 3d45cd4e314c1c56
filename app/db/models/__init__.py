from app.db.models.activation_logs import ActivationLog
from app.db.models.brands import Brand
from app.db.models.campaigns import Campaign
from app.db.models.users import User
from app.db.models.vouchers import Voucher
from app.db.models.winners import Winner

__all__ = [
    "ActivationLog",
    "Brand",
    "Campaign",
    "User",
    "Voucher",
    "Winner",
]
