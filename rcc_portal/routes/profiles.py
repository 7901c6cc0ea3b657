from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from sqlalchemy.orm import Session

from rcc_portal.database.db import get_db
from rcc_portal.deps import get_current_profile, require_admin
from rcc_portal.models.profiles import Profile
from rcc_portal.schemas.profiles import MyRegistrationOut, ProfileOut, ProfileUpdate, RoleUpdate
from rcc_portal.services.errors import InvalidUploadError, NotFoundError
from rcc_portal.services.profiles import set_avatar, set_role, update_profile
from rcc_portal.services.registrations import list_user_registrations
from rcc_portal.services.storage import get_storage
from rcc_portal.utils.files import save_upload

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("/me", response_model=ProfileOut)
def my_profile(profile: Profile = Depends(get_current_profile)):
    return profile


@router.put("/me", response_model=ProfileOut)
def edit_my_profile(
    payload: ProfileUpdate,
    profile: Profile = Depends(get_current_profile),
    db: Session = Depends(get_db),
):
    return update_profile(db, profile, payload)


@router.get("/me/registrations", response_model=list[MyRegistrationOut])
def my_registrations(profile: Profile = Depends(get_current_profile), db: Session = Depends(get_db)):
    return list_user_registrations(db, profile.id)


@router.post("/me/avatar", response_model=ProfileOut)
async def upload_avatar(
    file: UploadFile = File(...),
    profile: Profile = Depends(get_current_profile),
    db: Session = Depends(get_db),
):
    previous = profile.avatar_url
    try:
        stored = await save_upload(file, "avatars", str(profile.id))
    except InvalidUploadError as e:
        raise HTTPException(status_code=400, detail=str(e))
    profile = set_avatar(db, profile, stored.url)
    get_storage().delete_by_url("avatars", previous)
    return profile


@router.put("/{profile_id}/role", response_model=ProfileOut)
def assign_role(
    profile_id: int,
    payload: RoleUpdate,
    _: Profile = Depends(require_admin),
    db: Session = Depends(get_db),
):
    try:
        return set_role(db, profile_id, payload.role)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
