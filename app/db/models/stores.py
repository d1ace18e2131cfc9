from enum import Enum
from datetime import datetime
from sqlalchemy import Boolean, Integer, String, DateTime, Enum as SQLEnum, func
from sqlalchemy.orm import Mapped, mapped_column
from app.db.database import Base


class WorkspaceType(str, Enum):
    BUSINESS = "BUSINESS"
    EDUCATION = "EDUCATION"


class Stores(Base):
    __tablename__ = "stores"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    workspace_type: Mapped[WorkspaceType] = mapped_column(SQLEnum(WorkspaceType, name="workspace_type_enum"), nullable=False, default=WorkspaceType.BUSINESS)
    timezone: Mapped[str] = mapped_column(String(50), nullable=False, default="UTC")
    auto_schedule_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
