from datetime import date
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_stores
from app.db.models.stores import Stores
from app.schemas.schedule_generations import (
    GenerationOutcomeResponse,
    ResolveWarningsRequest,
    ReviewStatusResponse,
    ScheduleGenerationResponse,
    outcome_response,
)
from app.services.scheduling import (
    ScheduleInputError,
    ScheduleStores,
    apply_schedule,
    preview_schedule,
)
from app.services.scheduling.review import (
    GenerationNotFoundError,
    get_latest_generation,
    mark_generation_viewed,
    resolve_warnings,
    store_needs_review,
)

router = APIRouter(tags=["schedules"])


def _require_store(db: Session, store_id: int) -> Stores:
    store = db.get(Stores, store_id)
    if not store:
        raise HTTPException(status_code=404, detail="Store not found")
    return store


@router.post("/stores/{store_id}/schedules/{week_start}/preview", response_model=GenerationOutcomeResponse)
def preview_week_schedule(
    store_id: int,
    week_start: date,
    db: Session = Depends(get_db),
    stores: ScheduleStores = Depends(get_stores),
):
    _require_store(db, store_id)
    try:
        outcome = preview_schedule(stores, store_id, week_start)
    except ScheduleInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return outcome_response(outcome)


@router.post("/stores/{store_id}/schedules/{week_start}/apply", response_model=GenerationOutcomeResponse)
def apply_week_schedule(
    store_id: int,
    week_start: date,
    db: Session = Depends(get_db),
    stores: ScheduleStores = Depends(get_stores),
):
    _require_store(db, store_id)
    try:
        outcome = apply_schedule(stores, store_id, week_start)
    except ScheduleInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return outcome_response(outcome)


@router.get("/stores/{store_id}/schedules/{week_start}/generation", response_model=ScheduleGenerationResponse)
def get_week_generation(
    store_id: int,
    week_start: date,
    db: Session = Depends(get_db),
):
    _require_store(db, store_id)
    generation = get_latest_generation(db, store_id, week_start)
    if not generation:
        raise HTTPException(status_code=404, detail="No schedule generation for this week")
    return generation


@router.get("/stores/{store_id}/schedule-review", response_model=ReviewStatusResponse)
def get_review_status(
    store_id: int,
    db: Session = Depends(get_db),
):
    _require_store(db, store_id)
    return ReviewStatusResponse(store_id=store_id, needs_review=store_needs_review(db, store_id))


@router.post("/schedule-generations/{generation_id}/viewed", response_model=ScheduleGenerationResponse)
def view_generation(
    generation_id: int,
    db: Session = Depends(get_db),
):
    try:
        return mark_generation_viewed(db, generation_id)
    except GenerationNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/schedule-generations/{generation_id}/resolve", response_model=ScheduleGenerationResponse)
def resolve_generation_warnings(
    generation_id: int,
    payload: ResolveWarningsRequest,
    db: Session = Depends(get_db),
):
    try:
        return resolve_warnings(db, generation_id, payload.indices)
    except GenerationNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
