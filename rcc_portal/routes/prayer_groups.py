from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from rcc_portal.database.db import get_db
from rcc_portal.deps import require_staff
from rcc_portal.models.profiles import Profile
from rcc_portal.schemas.prayer_groups import PrayerGroupCreate, PrayerGroupOut, PrayerGroupUpdate
from rcc_portal.services.errors import NotFoundError
from rcc_portal.services.prayer_groups import create_group, delete_group, list_groups, update_group

router = APIRouter(prefix="/prayer-groups", tags=["prayer-groups"])


@router.get("", response_model=list[PrayerGroupOut])
def group_list(db: Session = Depends(get_db)):
    return list_groups(db)


@router.post("", response_model=PrayerGroupOut, status_code=201)
def new_group(payload: PrayerGroupCreate, _: Profile = Depends(require_staff), db: Session = Depends(get_db)):
    return create_group(db, payload)


@router.put("/{group_id}", response_model=PrayerGroupOut)
def edit_group(
    group_id: int,
    payload: PrayerGroupUpdate,
    _: Profile = Depends(require_staff),
    db: Session = Depends(get_db),
):
    try:
        return update_group(db, group_id, payload)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/{group_id}", status_code=204)
def remove_group(group_id: int, _: Profile = Depends(require_staff), db: Session = Depends(get_db)):
    try:
        delete_group(db, group_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return Response(status_code=204)
