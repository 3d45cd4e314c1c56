from app.vouchers.service import VoucherService

__all__ = ["VoucherService"]
