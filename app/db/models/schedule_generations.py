from typing import Optional
from datetime import date, datetime
from sqlalchemy import JSON, Boolean, Date, DateTime, Float, ForeignKey, Index, Integer, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from app.db.database import Base


JSONType = JSON().with_variant(JSONB(), "postgresql")


class ScheduleGenerations(Base):
    __tablename__ = "schedule_generations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    store_id: Mapped[int] = mapped_column(Integer, ForeignKey("stores.id"), nullable=False)
    week_start_date: Mapped[date] = mapped_column(Date, nullable=False)
    total_shifts_required: Mapped[int] = mapped_column(Integer, nullable=False)
    total_shifts_filled: Mapped[int] = mapped_column(Integer, nullable=False)
    coverage_percent: Mapped[float] = mapped_column(Float, nullable=False)
    fairness_score: Mapped[float] = mapped_column(Float, nullable=False)
    total_warnings: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    warnings_json: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    stats_json: Mapped[dict] = mapped_column(JSONType, nullable=False, default=dict)
    is_auto_generated: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    auto_triggered_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    is_accepted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    accepted_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    needs_review: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    has_been_viewed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    viewed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    resolved_warnings: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)  # indices into warnings_json
    supersedes_generation_id: Mapped[Optional[int]] = mapped_column(Integer, ForeignKey("schedule_generations.id"), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        Index("ix_generations_store_week", "store_id", "week_start_date"),
    )
