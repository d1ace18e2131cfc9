from datetime import date, datetime
from sqlalchemy import CheckConstraint, Date, DateTime, ForeignKey, Integer, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from app.db.database import Base


class ShiftRequirements(Base):
    __tablename__ = "shift_requirements"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    store_id: Mapped[int] = mapped_column(Integer, ForeignKey("stores.id"), nullable=False, index=True)
    week_start_date: Mapped[date] = mapped_column(Date, nullable=False)  # Monday
    day_of_week: Mapped[int] = mapped_column(Integer, nullable=False)  # 0=Monday .. 6=Sunday
    shift_template_id: Mapped[int] = mapped_column(Integer, ForeignKey("shift_templates.id"), nullable=False)
    required_staff_count: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    __table_args__ = (
        UniqueConstraint('store_id', 'week_start_date', 'day_of_week', 'shift_template_id', name='uix_shift_requirements_slot'),
        CheckConstraint('required_staff_count >= 0', name='ck_shift_requirements_count'),
        CheckConstraint('day_of_week BETWEEN 0 AND 6', name='ck_shift_requirements_day'),
    )
