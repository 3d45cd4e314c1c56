from __future__ import annotations

from datetime import datetime

from sqlalchemy import BOOLEAN, BigInteger, CheckConstraint, DateTime, Index, String, text
from sqlalchemy.orm import Mapped, mapped_column

from app.db.models.base import Base


class ActivationLog(Base):
    __tablename__ = "activation_logs"
    __table_args__ = (
        CheckConstraint(
            "reason IS NULL OR reason IN "
            "('INVALID_CODE','ALREADY_ACTIVATED','CAMPAIGN_INACTIVE','CAMPAIGN_EXPIRED')",
            name="reason",
        ),
        CheckConstraint(
            "(success AND reason IS NULL) OR (NOT success AND reason IS NOT NULL)",
            name="success_reason_consistency",
        ),
        Index("idx_activation_logs_handle_time", "external_handle", "created_at"),
        Index("idx_activation_logs_code", "code"),
    )

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True)
    external_handle: Mapped[str | None] = mapped_column(String(64), nullable=True)
    code: Mapped[str] = mapped_column(String(64), nullable=False)
    success: Mapped[bool] = mapped_column(BOOLEAN, nullable=False)
    reason: Mapped[str | None] = mapped_column(String(32), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=text("now()"),
    )
