from typing import Literal

from fastapi import APIRouter, Depends, File, HTTPException, Query, Response, UploadFile
from sqlalchemy.orm import Session

from rcc_portal.core.config import DEFAULT_PAGE_SIZE
from rcc_portal.database.db import get_db
from rcc_portal.deps import require_staff
from rcc_portal.models.profiles import Profile
from rcc_portal.schemas.events import (
    EventCreate,
    EventListOut,
    EventOut,
    EventStatsOut,
    EventUpdate,
    HomeOut,
    RegistrationFormOut,
)
from rcc_portal.schemas.pagination import window_out
from rcc_portal.services.errors import InvalidUploadError, NotFoundError
from rcc_portal.services.events import (
    create_event,
    delete_event,
    get_event,
    get_event_stats,
    home_feed,
    list_events,
    set_event_media,
    update_event,
)
from rcc_portal.services.registration_form import build_rules
from rcc_portal.utils.files import save_upload

router = APIRouter(prefix="/event", tags=["events"])


@router.get("", response_model=EventListOut)
def event_list(
    when: Literal["upcoming", "past", "all"] = "upcoming",
    page: int = Query(1, ge=1),
    page_size: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=100),
    db: Session = Depends(get_db),
):
    events, total = list_events(db, when=when, page=page, page_size=page_size)
    return {
        "items": events,
        "total": total,
        "page": page,
        "page_size": page_size,
        "pagination": window_out(page, total, page_size),
    }


@router.get("/home", response_model=HomeOut)
def home(db: Session = Depends(get_db)):
    """Next upcoming events and latest published news for the landing page."""
    return home_feed(db)


@router.post("", response_model=EventOut, status_code=201)
def new_event(payload: EventCreate, profile: Profile = Depends(require_staff), db: Session = Depends(get_db)):
    return create_event(db, payload, autor_id=profile.id)


@router.get("/{event_id}", response_model=EventOut)
def event_detail(event_id: int, db: Session = Depends(get_db)):
    try:
        return get_event(db, event_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/{event_id}/registration-form", response_model=RegistrationFormOut)
def registration_form(event_id: int, db: Session = Depends(get_db)):
    try:
        event = get_event(db, event_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    rules = build_rules(event.form_fields_config)
    return {"event_id": event.id, "guardian_policy": rules.policy.value, "fields": rules.describe()}


@router.put("/{event_id}", response_model=EventOut)
def edit_event(
    event_id: int,
    payload: EventUpdate,
    _: Profile = Depends(require_staff),
    db: Session = Depends(get_db),
):
    try:
        return update_event(db, event_id, payload)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/{event_id}", status_code=204)
def remove_event(event_id: int, _: Profile = Depends(require_staff), db: Session = Depends(get_db)):
    try:
        delete_event(db, event_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return Response(status_code=204)


async def _upload_event_media(db: Session, event_id: int, file: UploadFile, *, field: str, bucket: str, owner: int):
    try:
        get_event(db, event_id)
        stored = await save_upload(file, bucket, str(owner))
        return set_event_media(db, event_id, field=field, url=stored.url)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidUploadError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/{event_id}/image", response_model=EventOut)
async def upload_event_image(
    event_id: int,
    file: UploadFile = File(...),
    profile: Profile = Depends(require_staff),
    db: Session = Depends(get_db),
):
    return await _upload_event_media(
        db, event_id, file, field="imagem_url", bucket="event_images", owner=profile.id
    )


@router.post("/{event_id}/qr-code", response_model=EventOut)
async def upload_event_qr_code(
    event_id: int,
    file: UploadFile = File(...),
    profile: Profile = Depends(require_staff),
    db: Session = Depends(get_db),
):
    return await _upload_event_media(
        db, event_id, file, field="qr_code_url", bucket="qr_codes", owner=profile.id
    )


@router.get("/{event_id}/stats", response_model=EventStatsOut)
def event_stats(event_id: int, _: Profile = Depends(require_staff), db: Session = Depends(get_db)):
    stats = get_event_stats(db, event_id)
    if not stats:
        raise HTTPException(status_code=404, detail="Evento não encontrado.")
    return stats
