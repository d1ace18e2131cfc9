from typing import Optional
from datetime import date, datetime
from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Index, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from app.db.database import Base


class AvailabilityEntries(Base):
    __tablename__ = "availability_entries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    worker_id: Mapped[int] = mapped_column(Integer, nullable=False)  # employees.id or students.id depending on workspace
    store_id: Mapped[int] = mapped_column(Integer, ForeignKey("stores.id"), nullable=False)
    week_start_date: Mapped[date] = mapped_column(Date, nullable=False)
    shift_template_id: Mapped[int] = mapped_column(Integer, ForeignKey("shift_templates.id"), nullable=False)
    day_of_week: Mapped[int] = mapped_column(Integer, nullable=False)  # 0=Monday .. 6=Sunday
    is_available: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    submitted_by_user_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    is_owner_override: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    override_reason: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        Index("ix_availability_store_week", "store_id", "week_start_date"),
        Index("ix_availability_worker_week", "worker_id", "week_start_date"),
    )
