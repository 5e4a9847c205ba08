from datetime import datetime, timezone
from typing import TYPE_CHECKING

from sqlalchemy import String, Integer, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship

from guardquote.models.base import Base

if TYPE_CHECKING:
    from guardquote.models.quote import Quote

def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)

class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    # always stored lower-cased; lookups lower-case the probe as well
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(255))
    first_name: Mapped[str] = mapped_column(String(120))
    last_name: Mapped[str] = mapped_column(String(120))
    user_type: Mapped[str] = mapped_column(String(32), default="individual")  # individual | business
    company_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(32), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    quotes: Mapped[list["Quote"]] = relationship(back_populates="owner", cascade="all, delete-orphan", passive_deletes=True)
