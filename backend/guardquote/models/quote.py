from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from sqlalchemy import String, Integer, ForeignKey, DateTime, Numeric, Text, JSON, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from guardquote.models.base import Base

if TYPE_CHECKING:
    from guardquote.models.user import User

class Quote(Base):
    __tablename__ = "quotes"
    __table_args__ = (
        CheckConstraint("quote_type IN ('individual', 'business')", name="ck_quotes_quote_type"),
        CheckConstraint(
            "status IN ('pending', 'in_review', 'quoted', 'accepted', 'rejected', 'expired')",
            name="ck_quotes_status",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True)
    quote_type: Mapped[str] = mapped_column(String(32))  # individual | business
    status: Mapped[str] = mapped_column(String(32), default="pending")  # see services/quote_status.py
    estimated_amount: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    # individual track
    coverage_type: Mapped[str | None] = mapped_column(String(64), nullable=True)
    coverage_level: Mapped[str | None] = mapped_column(String(64), nullable=True)
    health_info: Mapped[dict[str, Any] | None] = mapped_column(JSON(none_as_null=True), nullable=True)
    employment_status: Mapped[str | None] = mapped_column(String(64), nullable=True)

    # business track
    industry: Mapped[str | None] = mapped_column(String(64), nullable=True)
    num_employees: Mapped[int | None] = mapped_column(Integer, nullable=True)
    annual_revenue: Mapped[Decimal | None] = mapped_column(Numeric(15, 2), nullable=True)
    business_info: Mapped[dict[str, Any] | None] = mapped_column(JSON(none_as_null=True), nullable=True)

    # set by QuoteRepository on every write
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))

    owner: Mapped["User"] = relationship(back_populates="quotes")
