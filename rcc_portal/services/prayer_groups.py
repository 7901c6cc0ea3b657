import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from rcc_portal.models.prayer_groups import PrayerGroup
from rcc_portal.schemas.prayer_groups import PrayerGroupCreate, PrayerGroupUpdate
from rcc_portal.services.errors import NotFoundError

logger = logging.getLogger(__name__)


def list_groups(db: Session) -> list[PrayerGroup]:
    return list(db.scalars(select(PrayerGroup).order_by(PrayerGroup.nome.asc())))


def get_group(db: Session, group_id: int) -> PrayerGroup:
    group = db.get(PrayerGroup, group_id)
    if not group:
        raise NotFoundError("Grupo de oração não encontrado.")
    return group


def create_group(db: Session, payload: PrayerGroupCreate) -> PrayerGroup:
    group = PrayerGroup(**payload.model_dump())
    db.add(group)
    db.commit()
    db.refresh(group)
    logger.info("Prayer group %s created", group.id)
    return group


def update_group(db: Session, group_id: int, payload: PrayerGroupUpdate) -> PrayerGroup:
    group = get_group(db, group_id)
    for key, value in payload.model_dump(exclude_unset=True).items():
        setattr(group, key, value)
    db.commit()
    db.refresh(group)
    logger.info("Prayer group %s updated", group.id)
    return group


def delete_group(db: Session, group_id: int) -> None:
    group = get_group(db, group_id)
    db.delete(group)
    db.commit()
    logger.info("Prayer group %s deleted", group_id)
