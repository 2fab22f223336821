from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from app.database import get_db
from app.crud import user as crud_user
from app.schemas.hydration import (
    HydrationDecisionResponse,
    HydrationSettingsUpdate,
    HydrationStatusResponse,
    LogWaterRequest,
)
from app.services import hydration_service
from app.services.hydration_model import HydrationDecisionModel
from config import HYDRATION_WINDOW_DAYS

router = APIRouter(prefix="/hydration", tags=["Hydration"])


def get_hydration_model(request: Request) -> HydrationDecisionModel:
    """The model trained at start-up (see app.main lifespan)."""
    return request.app.state.hydration_model


def _ensure_user(db: Session, user_id: int):
    if crud_user.get_user(db, user_id=user_id) is None:
        raise HTTPException(status_code=404, detail="User not found")


@router.get("/{user_id}", response_model=HydrationStatusResponse)
def get_hydration(
    user_id: int,
    db: Session = Depends(get_db),
    model: HydrationDecisionModel = Depends(get_hydration_model)
):
    _ensure_user(db, user_id)
    status_data = hydration_service.get_status(db, user_id)
    _, decision = hydration_service.get_decision(db, user_id, model)
    return HydrationStatusResponse(**status_data, tip_text=decision.tip_text)


@router.patch("/{user_id}", response_model=HydrationStatusResponse)
def update_hydration_settings(
    user_id: int,
    settings_in: HydrationSettingsUpdate,
    db: Session = Depends(get_db),
    model: HydrationDecisionModel = Depends(get_hydration_model)
):
    """
    Change goal, intensity or the reminder flag. The interval is recomputed.
    """
    _ensure_user(db, user_id)
    try:
        _, decision = hydration_service.update_settings(db, user_id, model, **settings_in.model_dump(exclude_unset=True))
    except ValueError as ve:
        raise HTTPException(status_code=400, detail=str(ve))

    return HydrationStatusResponse(**hydration_service.get_status(db, user_id), tip_text=decision.tip_text)


@router.post("/{user_id}/log", response_model=HydrationStatusResponse)
def log_water(
    user_id: int,
    request: LogWaterRequest,
    db: Session = Depends(get_db),
    model: HydrationDecisionModel = Depends(get_hydration_model)
):
    _ensure_user(db, user_id)
    try:
        _, log, decision = hydration_service.log_water(db, user_id, request.amount_ml, model, now=request.logged_at)
    except ValueError as ve:
        raise HTTPException(status_code=400, detail=str(ve))

    status_data = hydration_service.get_status(db, user_id, today=log.date)
    return HydrationStatusResponse(**status_data, tip_text=decision.tip_text)


@router.post("/{user_id}/reset", response_model=HydrationStatusResponse)
def reset_hydration(
    user_id: int,
    db: Session = Depends(get_db),
    model: HydrationDecisionModel = Depends(get_hydration_model)
):
    """Sets today's intake back to zero."""
    _ensure_user(db, user_id)
    hydration_service.reset_today(db, user_id)
    _, decision = hydration_service.get_decision(db, user_id, model)
    return HydrationStatusResponse(**hydration_service.get_status(db, user_id), tip_text=decision.tip_text)


@router.get("/{user_id}/decision", response_model=HydrationDecisionResponse)
def get_hydration_decision(
    user_id: int,
    window_days: int = Query(HYDRATION_WINDOW_DAYS, ge=1, le=90),
    db: Session = Depends(get_db),
    model: HydrationDecisionModel = Depends(get_hydration_model)
):
    """
    Reminder interval and tip for the average adherence over the last `window_days` days.
    window_days=1 uses today only.
    """
    _ensure_user(db, user_id)
    adherence, decision = hydration_service.get_decision(db, user_id, model, window_days=window_days)
    return HydrationDecisionResponse(
        adherence_percent=round(adherence, 1),
        window_days=window_days,
        interval=decision.interval,
        tip_category=decision.tip_category,
        tip_text=decision.tip_text
    )
