from sqlalchemy import Date, Integer, DateTime, ForeignKey, Enum as SQLEnum, Index, func
from datetime import date, datetime
from sqlalchemy.orm import Mapped, mapped_column
from enum import Enum
from typing import Optional
from app.db.database import Base


class AssignmentSource(str, Enum):
    AUTO = "AUTO"
    MANUAL = "MANUAL"  # edited by the owner, never replaced by a generation


class ScheduleAssignments(Base):
    __tablename__ = "schedule_assignments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    store_id: Mapped[int] = mapped_column(Integer, ForeignKey("stores.id"), nullable=False)
    worker_id: Mapped[int] = mapped_column(Integer, nullable=False)
    shift_template_id: Mapped[int] = mapped_column(Integer, ForeignKey("shift_templates.id"), nullable=False)
    scheduled_date: Mapped[date] = mapped_column(Date, nullable=False)
    generation_id: Mapped[Optional[int]] = mapped_column(Integer, ForeignKey("schedule_generations.id"), nullable=True)
    source: Mapped[AssignmentSource] = mapped_column(SQLEnum(AssignmentSource, name="assignment_source_enum"), nullable=False, default=AssignmentSource.AUTO)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    __table_args__ = (
        Index("ix_assignments_store_date", "store_id", "scheduled_date"),
        Index("ix_assignments_worker_date", "worker_id", "scheduled_date"),
    )
