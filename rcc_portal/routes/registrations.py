from typing import Literal

from fastapi import APIRouter, Depends, File, HTTPException, Query, Response, UploadFile
from sqlalchemy.orm import Session

from rcc_portal.database.db import get_db
from rcc_portal.deps import get_current_profile, require_staff
from rcc_portal.models.profiles import Profile
from rcc_portal.schemas.registrations import (
    EventRegistrationOut,
    MyEventRegistrationOut,
    RegistrationCreate,
    RegistrationFlagsUpdate,
    RegistrationOut,
)
from rcc_portal.services.errors import (
    FormValidationError,
    InvalidUploadError,
    NotFoundError,
    PermissionDeniedError,
)
from rcc_portal.services.exports import export_registrations
from rcc_portal.services.registrations import (
    AlreadyRegisteredError,
    RegistrationBusyError,
    RegistrationClosedError,
    attach_payment_proof,
    create_registration,
    get_registration,
    get_user_registration,
    list_event_registrations,
    update_registration_flags,
)
from rcc_portal.utils.files import save_upload

router = APIRouter(tags=["registrations"])


@router.post("/event/{event_id}/registrations", response_model=RegistrationOut, status_code=201)
def register(
    event_id: int,
    payload: RegistrationCreate,
    profile: Profile = Depends(get_current_profile),
    db: Session = Depends(get_db),
):
    try:
        return create_registration(
            db, event_id=event_id, user_id=profile.id, form_data=payload.dados_formulario
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except FormValidationError as e:
        raise HTTPException(status_code=422, detail={"errors": e.errors})
    except (AlreadyRegisteredError, RegistrationClosedError, RegistrationBusyError) as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.get("/event/{event_id}/registrations/me", response_model=MyEventRegistrationOut)
def my_registration(event_id: int, profile: Profile = Depends(get_current_profile), db: Session = Depends(get_db)):
    try:
        registration = get_user_registration(db, event_id=event_id, user_id=profile.id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    event = registration.event
    pix = None
    if event.has_fee and not registration.confirmado:
        pix = {
            "taxa_inscricao": event.taxa_inscricao,
            "chave_pix": event.chave_pix,
            "qr_code_url": event.qr_code_url,
        }
    return {"registration": registration, "pix": pix}


@router.get("/event/{event_id}/registrations", response_model=list[EventRegistrationOut])
def event_registrations(event_id: int, _: Profile = Depends(require_staff), db: Session = Depends(get_db)):
    try:
        return list_event_registrations(db, event_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/event/{event_id}/registrations/export")
def export_event_registrations(
    event_id: int,
    format: Literal["pdf", "xlsx", "csv"] = Query("pdf"),
    _: Profile = Depends(require_staff),
    db: Session = Depends(get_db),
):
    try:
        export = export_registrations(db, event_id, format)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return Response(
        content=export.data,
        media_type=export.content_type,
        headers={"Content-Disposition": export.content_disposition},
    )


@router.post("/registrations/{registration_id}/proof", response_model=RegistrationOut)
async def upload_payment_proof(
    registration_id: int,
    file: UploadFile = File(...),
    profile: Profile = Depends(get_current_profile),
    db: Session = Depends(get_db),
):
    try:
        registration = get_registration(db, registration_id)
        if registration.user_id != profile.id:
            raise PermissionDeniedError("Esta inscrição pertence a outro usuário.")
        stored = await save_upload(file, "registration_proofs", str(registration.id))
        return attach_payment_proof(db, registration_id=registration.id, user_id=profile.id, url=stored.url)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except PermissionDeniedError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except InvalidUploadError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.patch("/registrations/{registration_id}", response_model=RegistrationOut)
def set_registration_flags(
    registration_id: int,
    payload: RegistrationFlagsUpdate,
    _: Profile = Depends(require_staff),
    db: Session = Depends(get_db),
):
    try:
        return update_registration_flags(
            db, registration_id, confirmado=payload.confirmado, presente=payload.presente
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
