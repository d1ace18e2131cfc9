"""
Generation review: the owner-facing badge and warning resolution.
These touch review metadata only; the generation snapshot itself is never edited.
"""

from datetime import date, datetime, timezone
from typing import Optional

from sqlalchemy import select, and_
from sqlalchemy.orm import Session

from app.db.models.schedule_generations import ScheduleGenerations


class GenerationNotFoundError(Exception):
    pass


def get_latest_generation(db: Session, store_id: int, week_start: date) -> Optional[ScheduleGenerations]:
    stmt = select(ScheduleGenerations).where(
        and_(
            ScheduleGenerations.store_id == store_id,
            ScheduleGenerations.week_start_date == week_start,
        )
    ).order_by(ScheduleGenerations.id.desc()).limit(1)
    return db.execute(stmt).scalar_one_or_none()


def _get_generation(db: Session, generation_id: int) -> ScheduleGenerations:
    generation = db.get(ScheduleGenerations, generation_id)
    if generation is None:
        raise GenerationNotFoundError(f"Schedule generation {generation_id} not found")
    return generation


def mark_generation_viewed(db: Session, generation_id: int) -> ScheduleGenerations:
    """First view clears the needs-review badge."""
    generation = _get_generation(db, generation_id)
    if not generation.has_been_viewed:
        generation.has_been_viewed = True
        generation.viewed_at = datetime.now(timezone.utc)
        generation.needs_review = False
        db.commit()
        db.refresh(generation)
    return generation


def resolve_warnings(
    db: Session,
    generation_id: int,
    indices: Optional[list[int]] = None,
) -> ScheduleGenerations:
    """Mark warnings (by index) as handled; all of them when indices is None."""
    generation = _get_generation(db, generation_id)
    total = len(generation.warnings_json or [])

    if indices is None:
        indices = list(range(total))
    invalid = [i for i in indices if not 0 <= i < total]
    if invalid:
        raise ValueError(f"Warning indices out of range: {invalid}")

    resolved = sorted(set(generation.resolved_warnings or []) | set(indices))
    # reassign so the JSON column is flagged dirty
    generation.resolved_warnings = resolved
    db.commit()
    db.refresh(generation)
    return generation


def active_warnings(generation: ScheduleGenerations) -> list[dict]:
    resolved = set(generation.resolved_warnings or [])
    return [w for i, w in enumerate(generation.warnings_json or []) if i not in resolved]


def store_needs_review(db: Session, store_id: int) -> bool:
    stmt = select(ScheduleGenerations.id).where(
        and_(
            ScheduleGenerations.store_id == store_id,
            ScheduleGenerations.needs_review == True,
        )
    ).limit(1)
    return db.execute(stmt).scalar_one_or_none() is not None
