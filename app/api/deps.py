from typing import Generator
from fastapi import Depends
from sqlalchemy.orm import Session

from app.db.database import SessionLocal
from app.services.scheduling import ScheduleStores, get_schedule_stores


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_stores(
    store_id: int,
    db: Session = Depends(get_db),
) -> ScheduleStores:
    """Scheduling stores for the store in the path, roster picked by workspace type."""
    return get_schedule_stores(db, store_id)
