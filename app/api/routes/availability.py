from datetime import date
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_stores
from app.db.models.stores import Stores
from app.schemas.availability import (
    AvailabilityOverride,
    AvailabilitySubmit,
    RecallResponse,
    SubmissionResponse,
    SubmissionStatusResponse,
)
from app.schemas.schedule_generations import outcome_response
from app.services.scheduling import (
    ScheduleInputError,
    ScheduleStores,
    check_all_submitted,
    override_availability,
    recall_availability,
    submit_availability,
)
from app.services.scheduling.expander import validate_week_start

router = APIRouter(prefix="/stores/{store_id}/availability", tags=["availability"])


def _require_store(db: Session, store_id: int) -> Stores:
    store = db.get(Stores, store_id)
    if not store:
        raise HTTPException(status_code=404, detail="Store not found")
    return store


def _submission_response(result) -> SubmissionResponse:
    return SubmissionResponse(
        entries_saved=result.entries_saved,
        status=SubmissionStatusResponse.model_validate(result.status),
        auto_schedule=outcome_response(result.auto_schedule) if result.auto_schedule else None,
    )


@router.post("/{week_start}", response_model=SubmissionResponse)
def submit_week_availability(
    store_id: int,
    week_start: date,
    payload: AvailabilitySubmit,
    db: Session = Depends(get_db),
    stores: ScheduleStores = Depends(get_stores),
):
    _require_store(db, store_id)
    slots = [(s.day_of_week, s.shift_template_id) for s in payload.slots]
    try:
        result = submit_availability(
            stores, store_id, week_start, payload.worker_id, slots, payload.submitted_by_user_id
        )
    except ScheduleInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _submission_response(result)


@router.delete("/{week_start}", response_model=RecallResponse)
def recall_week_availability(
    store_id: int,
    week_start: date,
    worker_id: int,
    db: Session = Depends(get_db),
    stores: ScheduleStores = Depends(get_stores),
):
    _require_store(db, store_id)
    try:
        removed = recall_availability(stores, store_id, week_start, worker_id)
    except ScheduleInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return RecallResponse(entries_removed=removed)


@router.put("/{week_start}/override", response_model=SubmissionResponse)
def override_week_availability(
    store_id: int,
    week_start: date,
    payload: AvailabilityOverride,
    db: Session = Depends(get_db),
    stores: ScheduleStores = Depends(get_stores),
):
    _require_store(db, store_id)
    slots = [(s.day_of_week, s.shift_template_id) for s in payload.slots]
    try:
        result = override_availability(
            stores, store_id, week_start, payload.worker_id, slots,
            payload.reason, payload.submitted_by_user_id,
        )
    except ScheduleInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _submission_response(result)


@router.get("/{week_start}/status", response_model=SubmissionStatusResponse)
def get_submission_status(
    store_id: int,
    week_start: date,
    db: Session = Depends(get_db),
    stores: ScheduleStores = Depends(get_stores),
):
    _require_store(db, store_id)
    try:
        validate_week_start(week_start)
    except ScheduleInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return check_all_submitted(stores, store_id, week_start)
