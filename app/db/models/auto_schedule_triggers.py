from typing import Optional
from datetime import date, datetime
from sqlalchemy import Date, DateTime, ForeignKey, Integer, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from app.db.database import Base


class AutoScheduleTriggers(Base):
    __tablename__ = "auto_schedule_triggers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    store_id: Mapped[int] = mapped_column(Integer, ForeignKey("stores.id"), nullable=False)
    week_start_date: Mapped[date] = mapped_column(Date, nullable=False)
    generation_id: Mapped[Optional[int]] = mapped_column(Integer, ForeignKey("schedule_generations.id"), nullable=True)
    triggered_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # single serialization point for auto-generation
    __table_args__ = (
        UniqueConstraint('store_id', 'week_start_date', name='uix_auto_schedule_triggers_store_week'),
    )
