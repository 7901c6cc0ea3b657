import logging
from typing import Any, Optional

import redis
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from rcc_portal.core.config import get_redis_url
from rcc_portal.models.events import Event
from rcc_portal.models.registrations import Registration
from rcc_portal.services.errors import FormValidationError, NotFoundError, PermissionDeniedError
from rcc_portal.services.events import get_event
from rcc_portal.services.registration_form import GuardianPolicy, build_rules

logger = logging.getLogger(__name__)


class AlreadyRegisteredError(Exception):
    pass


class RegistrationClosedError(Exception):
    pass


class RegistrationBusyError(Exception):
    pass


LOCK_TIMEOUT = 10
LOCK_WAIT = 5


def get_redis_client():
    """Get Redis client for locking."""
    return redis.from_url(get_redis_url(), decode_responses=True)


def create_registration(
    db: Session,
    *,
    event_id: int,
    user_id: int,
    form_data: Optional[dict[str, Any]] = None,
    policy: Optional[GuardianPolicy] = None,
) -> Registration:
    """
    Sign a profile up for an event.

    The submission is checked against the event's form rules first; the
    insert itself runs under a per-(event, user) Redis lock so a double
    submit cannot create two rows.
    """
    event = get_event(db, event_id)
    if not event.is_registration_open():
        raise RegistrationClosedError("As inscrições para este evento estão encerradas.")

    result = build_rules(event.form_fields_config, policy=policy).validate(form_data)
    if not result.valid:
        raise FormValidationError(result.errors)

    redis_client = get_redis_client()
    lock = redis_client.lock(
        f"registration_lock:{event_id}:{user_id}", timeout=LOCK_TIMEOUT, blocking_timeout=LOCK_WAIT
    )

    try:
        if not lock.acquire(blocking=True, blocking_timeout=LOCK_WAIT):
            raise RegistrationBusyError("Inscrição em andamento, tente novamente.")
        try:
            return _create_registration_locked(db, event, user_id, result.cleaned)
        finally:
            lock.release()
    except redis.exceptions.LockError as exc:
        logger.warning("Registration lock failed for event %s user %s: %s", event_id, user_id, exc)
        raise RegistrationBusyError("Inscrição em andamento, tente novamente.") from exc


def _create_registration_locked(db: Session, event: Event, user_id: int, cleaned: dict) -> Registration:
    existing = db.scalar(
        select(Registration.id).where(Registration.evento_id == event.id, Registration.user_id == user_id)
    )
    if existing:
        raise AlreadyRegisteredError("Você já está inscrito neste evento!")

    registration = Registration(
        evento_id=event.id,
        user_id=user_id,
        # free events need no payment confirmation
        confirmado=not event.has_fee,
        presente=False,
        dados_formulario=cleaned,
    )
    db.add(registration)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise AlreadyRegisteredError("Você já está inscrito neste evento!") from exc
    db.refresh(registration)
    logger.info(
        "Registration %s created for event %s (user %s, confirmed=%s)",
        registration.id,
        event.id,
        user_id,
        registration.confirmado,
    )
    return registration


def get_registration(db: Session, registration_id: int) -> Registration:
    registration = db.get(Registration, registration_id)
    if not registration:
        raise NotFoundError("Inscrição não encontrada.")
    return registration


def get_user_registration(db: Session, *, event_id: int, user_id: int) -> Registration:
    registration = db.scalar(
        select(Registration).where(Registration.evento_id == event_id, Registration.user_id == user_id)
    )
    if not registration:
        raise NotFoundError("Inscrição não encontrada.")
    return registration


def attach_payment_proof(db: Session, *, registration_id: int, user_id: int, url: str) -> Registration:
    registration = get_registration(db, registration_id)
    if registration.user_id != user_id:
        raise PermissionDeniedError("Esta inscrição pertence a outro usuário.")
    registration.comprovante_url = url
    db.commit()
    db.refresh(registration)
    logger.info("Payment proof attached to registration %s", registration.id)
    return registration


def list_event_registrations(db: Session, event_id: int) -> list[Registration]:
    get_event(db, event_id)
    stmt = (
        select(Registration)
        .options(selectinload(Registration.profile))
        .where(Registration.evento_id == event_id)
        .order_by(Registration.created_at.asc(), Registration.id.asc())
    )
    return list(db.scalars(stmt))


def list_user_registrations(db: Session, user_id: int) -> list[Registration]:
    stmt = (
        select(Registration)
        .options(selectinload(Registration.event))
        .where(Registration.user_id == user_id)
        .order_by(Registration.created_at.desc(), Registration.id.desc())
    )
    return list(db.scalars(stmt))


def update_registration_flags(
    db: Session,
    registration_id: int,
    *,
    confirmado: Optional[bool] = None,
    presente: Optional[bool] = None,
) -> Registration:
    registration = get_registration(db, registration_id)
    if confirmado is not None:
        registration.confirmado = confirmado
    if presente is not None:
        registration.presente = presente
    db.commit()
    db.refresh(registration)
    logger.info(
        "Registration %s flags set: confirmado=%s presente=%s",
        registration.id,
        registration.confirmado,
        registration.presente,
    )
    return registration
