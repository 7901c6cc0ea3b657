import logging
from datetime import date
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from rcc_portal.models.events import Event
from rcc_portal.models.news import NewsPost
from rcc_portal.models.registrations import Registration
from rcc_portal.schemas.events import EventCreate, EventUpdate
from rcc_portal.services.errors import NotFoundError
from rcc_portal.services.registration_form import normalize_config

logger = logging.getLogger(__name__)

UPCOMING = "upcoming"
PAST = "past"
ALL = "all"

HOME_EVENTS_LIMIT = 3
HOME_NEWS_LIMIT = 2


def get_event(db: Session, event_id: int) -> Event:
    event = db.get(Event, event_id)
    if not event:
        raise NotFoundError("Evento não encontrado.")
    return event


def list_events(
    db: Session,
    *,
    when: str = UPCOMING,
    page: int = 1,
    page_size: int = 9,
    today: Optional[date] = None,
) -> tuple[list[Event], int]:
    today = today or date.today()
    stmt = select(Event)
    if when == UPCOMING:
        stmt = stmt.where(Event.data >= today).order_by(Event.data.asc(), Event.horario.asc())
    elif when == PAST:
        stmt = stmt.where(Event.data < today).order_by(Event.data.desc(), Event.horario.desc())
    else:
        stmt = stmt.order_by(Event.data.asc(), Event.horario.asc())

    total = db.scalar(select(func.count()).select_from(stmt.order_by(None).subquery()))
    offset = (max(page, 1) - 1) * page_size
    events = list(db.scalars(stmt.offset(offset).limit(page_size)))
    return events, int(total or 0)


def home_feed(db: Session, today: Optional[date] = None) -> dict:
    today = today or date.today()
    events = db.scalars(
        select(Event).where(Event.data >= today).order_by(Event.data.asc()).limit(HOME_EVENTS_LIMIT)
    )
    news = db.scalars(
        select(NewsPost)
        .where(NewsPost.publicado.is_(True))
        .order_by(NewsPost.created_at.desc(), NewsPost.id.desc())
        .limit(HOME_NEWS_LIMIT)
    )
    return {"events": list(events), "news": list(news)}


def create_event(db: Session, payload: EventCreate, *, autor_id: Optional[int]) -> Event:
    values = payload.model_dump()
    values["form_fields_config"] = normalize_config(values.get("form_fields_config"))
    event = Event(**values, autor_id=autor_id)
    db.add(event)
    db.commit()
    db.refresh(event)
    logger.info("Event %s created by profile %s", event.id, autor_id)
    return event


def update_event(db: Session, event_id: int, payload: EventUpdate) -> Event:
    event = get_event(db, event_id)
    values = payload.model_dump(exclude_unset=True)
    if "form_fields_config" in values:
        values["form_fields_config"] = normalize_config(values["form_fields_config"])
    for key, value in values.items():
        setattr(event, key, value)
    db.commit()
    db.refresh(event)
    logger.info("Event %s updated (%s)", event.id, ", ".join(sorted(values)))
    return event


def delete_event(db: Session, event_id: int) -> None:
    event = get_event(db, event_id)
    db.delete(event)
    db.commit()
    logger.info("Event %s deleted", event_id)


def set_event_media(db: Session, event_id: int, *, field: str, url: str) -> Event:
    event = get_event(db, event_id)
    setattr(event, field, url)
    db.commit()
    db.refresh(event)
    return event


def get_event_stats(db: Session, event_id: int) -> dict:
    event = db.get(Event, event_id)
    if not event:
        return {}

    def count(*conditions) -> int:
        value = db.scalar(
            select(func.count(Registration.id)).where(Registration.evento_id == event_id, *conditions)
        )
        return int(value or 0)

    return {
        "event_id": event.id,
        "total": count(),
        "confirmed": count(Registration.confirmado.is_(True)),
        "present": count(Registration.presente.is_(True)),
        "pending_payment": count(Registration.confirmado.is_(False)) if event.has_fee else 0,
    }
