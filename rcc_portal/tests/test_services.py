"""
Test service layer functions.
"""
import asyncio
import io
from datetime import date, datetime, timedelta, timezone

import pytest
from fastapi import UploadFile
from pydantic import ValidationError
from sqlalchemy.orm import Session
from starlette.datastructures import Headers

from rcc_portal.models.news import NewsPost
from rcc_portal.models.profiles import UserRole
from rcc_portal.schemas.events import EventCreate, EventUpdate
from rcc_portal.services.auth import (
    EmailTakenError,
    InvalidCredentialsError,
    InvalidResetTokenError,
    profile_from_token,
    request_password_reset,
    reset_password,
    sign_in,
    sign_out,
    sign_up,
)
from rcc_portal.services.errors import (
    FormValidationError,
    InvalidUploadError,
    NotFoundError,
    PermissionDeniedError,
)
from rcc_portal.services.events import create_event, get_event_stats, home_feed, list_events, update_event
from rcc_portal.services.mail import LoggingMailer
from rcc_portal.services.news import get_news, list_published
from rcc_portal.services.profiles import set_role
from rcc_portal.services.registrations import (
    AlreadyRegisteredError,
    RegistrationClosedError,
    attach_payment_proof,
    create_registration,
    list_event_registrations,
    list_user_registrations,
    update_registration_flags,
)
from rcc_portal.utils.files import save_upload


class TestRegistrationService:
    """Test registration service functions."""

    def test_free_event_is_confirmed(self, db_session: Session, event, member, redis_client):
        registration = create_registration(
            db_session, event_id=event.id, user_id=member.id, form_data={"nome": "Maria"}
        )

        assert registration.id is not None
        assert registration.confirmado is True
        assert registration.presente is False
        assert registration.dados_formulario == {"nome": "Maria"}

    def test_paid_event_waits_for_payment(self, db_session: Session, paid_event, member, redis_client):
        registration = create_registration(
            db_session, event_id=paid_event.id, user_id=member.id, form_data={"nome": "Maria", "idade": 30}
        )

        assert registration.confirmado is False

    def test_duplicate_registration(self, db_session: Session, event, member, redis_client):
        create_registration(db_session, event_id=event.id, user_id=member.id, form_data={})

        with pytest.raises(AlreadyRegisteredError, match="Você já está inscrito neste evento!"):
            create_registration(db_session, event_id=event.id, user_id=member.id, form_data={})

    def test_invalid_form(self, db_session: Session, paid_event, member, redis_client):
        with pytest.raises(FormValidationError) as exc_info:
            create_registration(
                db_session, event_id=paid_event.id, user_id=member.id, form_data={"nome": "Ana", "idade": 12}
            )

        assert set(exc_info.value.errors) == {"telefone_responsavel"}
        assert list_event_registrations(db_session, paid_event.id) == []

    def test_closed_registration(self, db_session: Session, make_event, member, redis_client):
        event = make_event(registration_deadline=datetime.now(timezone.utc) - timedelta(minutes=1))

        with pytest.raises(RegistrationClosedError):
            create_registration(db_session, event_id=event.id, user_id=member.id, form_data={})

    def test_missing_event(self, db_session: Session, member, redis_client):
        with pytest.raises(NotFoundError):
            create_registration(db_session, event_id=9999, user_id=member.id, form_data={})

    def test_lock_released_after_registration(self, db_session: Session, event, member, redis_client):
        create_registration(db_session, event_id=event.id, user_id=member.id, form_data={})

        assert redis_client.get(f"registration_lock:{event.id}:{member.id}") is None

    def test_attach_payment_proof_owner_only(self, db_session: Session, paid_event, member, staff, redis_client):
        registration = create_registration(
            db_session, event_id=paid_event.id, user_id=member.id, form_data={"nome": "Maria", "idade": 30}
        )

        with pytest.raises(PermissionDeniedError):
            attach_payment_proof(db_session, registration_id=registration.id, user_id=staff.id, url="/static/x.png")

        updated = attach_payment_proof(
            db_session, registration_id=registration.id, user_id=member.id, url="/static/x.png"
        )
        assert updated.comprovante_url == "/static/x.png"

    def test_update_flags(self, db_session: Session, paid_event, member, redis_client):
        registration = create_registration(
            db_session, event_id=paid_event.id, user_id=member.id, form_data={"nome": "Maria", "idade": 30}
        )

        updated = update_registration_flags(db_session, registration.id, confirmado=True)
        assert updated.confirmado is True
        assert updated.presente is False

        updated = update_registration_flags(db_session, registration.id, presente=True)
        assert updated.confirmado is True
        assert updated.presente is True

    def test_user_registrations_newest_first(self, db_session: Session, make_event, member, redis_client):
        first = make_event(nome="Primeiro Evento")
        second = make_event(nome="Segundo Evento")
        create_registration(db_session, event_id=first.id, user_id=member.id, form_data={})
        create_registration(db_session, event_id=second.id, user_id=member.id, form_data={})

        registrations = list_user_registrations(db_session, member.id)
        assert len(registrations) == 2
        assert registrations[0].event.nome == "Segundo Evento"


class TestEventService:
    """Test event service functions."""

    def test_create_event_normalizes_config(self, db_session: Session, staff):
        payload = EventCreate(
            nome="Retiro de Jovens",
            descricao="Um fim de semana de oração para os jovens.",
            data=date.today() + timedelta(days=3),
            horario="19:30",
            form_fields_config={"nome": {"required": True}, "cpf": {"required": True}},
        )

        event = create_event(db_session, payload, autor_id=staff.id)

        assert event.autor_id == staff.id
        assert event.tipo == "formacao"
        assert "cpf" not in event.form_fields_config
        assert event.form_fields_config["nome"] == {"required": True}
        assert event.form_fields_config["idade"] == {"required": False}

    def test_update_event_partial(self, db_session: Session, event):
        updated = update_event(db_session, event.id, EventUpdate(local="Paróquia São José"))

        assert updated.local == "Paróquia São José"
        assert updated.nome == event.nome

    def test_update_rejects_explicit_null_for_required_field(self):
        with pytest.raises(ValidationError):
            EventUpdate(nome=None)

        assert EventUpdate(chave_pix=None).model_dump(exclude_unset=True) == {"chave_pix": None}

    def test_list_events_by_period(self, db_session: Session, make_event):
        today = date(2026, 5, 10)
        make_event(nome="Evento Passado", data=today - timedelta(days=1))
        make_event(nome="Evento de Hoje", data=today)
        make_event(nome="Evento Futuro", data=today + timedelta(days=5))

        upcoming, total = list_events(db_session, when="upcoming", today=today)
        assert total == 2
        assert [e.nome for e in upcoming] == ["Evento de Hoje", "Evento Futuro"]

        past, total = list_events(db_session, when="past", today=today)
        assert total == 1
        assert past[0].nome == "Evento Passado"

        _, total = list_events(db_session, when="all", today=today)
        assert total == 3

    def test_list_events_paginates(self, db_session: Session, make_event):
        today = date(2026, 5, 10)
        for offset in range(5):
            make_event(nome=f"Evento número {offset}", data=today + timedelta(days=offset))

        page, total = list_events(db_session, page=2, page_size=2, today=today)
        assert total == 5
        assert [e.nome for e in page] == ["Evento número 2", "Evento número 3"]

    def test_home_feed(self, db_session: Session, make_event):
        today = date(2026, 5, 10)
        for offset in range(4):
            make_event(nome=f"Evento número {offset}", data=today + timedelta(days=offset))
        for index in range(3):
            db_session.add(NewsPost(titulo=f"Notícia {index}", conteudo="Conteúdo da notícia publicada."))
        db_session.add(NewsPost(titulo="Rascunho", conteudo="Conteúdo ainda não publicado.", publicado=False))
        db_session.commit()

        feed = home_feed(db_session, today=today)
        assert len(feed["events"]) == 3
        assert len(feed["news"]) == 2
        assert all(post.publicado for post in feed["news"])

    def test_event_stats(self, db_session: Session, paid_event, member, staff, redis_client):
        first = create_registration(
            db_session, event_id=paid_event.id, user_id=member.id, form_data={"nome": "Maria", "idade": 30}
        )
        create_registration(
            db_session, event_id=paid_event.id, user_id=staff.id, form_data={"nome": "João", "idade": 40}
        )
        update_registration_flags(db_session, first.id, confirmado=True, presente=True)

        stats = get_event_stats(db_session, paid_event.id)
        assert stats == {"event_id": paid_event.id, "total": 2, "confirmed": 1, "present": 1, "pending_payment": 1}

    def test_event_stats_missing_event(self, db_session: Session):
        assert get_event_stats(db_session, 9999) == {}


class TestNewsService:
    """Test news service functions."""

    def test_unpublished_hidden(self, db_session: Session):
        draft = NewsPost(titulo="Rascunho", conteudo="Conteúdo ainda não publicado.", publicado=False)
        db_session.add(draft)
        db_session.commit()

        with pytest.raises(NotFoundError):
            get_news(db_session, draft.id)
        assert get_news(db_session, draft.id, include_unpublished=True).id == draft.id

        items, total = list_published(db_session)
        assert items == []
        assert total == 0


class TestAuthService:
    """Test sign-up, sign-in and password recovery."""

    def test_sign_up_and_sign_in(self, db_session: Session):
        profile = sign_up(db_session, email=" Novo@Example.com ", password="segredo1", nome="Novo Membro")
        assert profile.email == "novo@example.com"
        assert profile.role == UserRole.SERVO.value

        token, signed_in = sign_in(db_session, email="novo@example.com", password="segredo1")
        assert signed_in.id == profile.id
        assert profile_from_token(db_session, token).id == profile.id

    def test_duplicate_email(self, db_session: Session, member):
        with pytest.raises(EmailTakenError):
            sign_up(db_session, email=member.email.upper(), password="segredo1", nome="Outra Pessoa")

    def test_wrong_password(self, db_session: Session, member):
        with pytest.raises(InvalidCredentialsError):
            sign_in(db_session, email=member.email, password="errada")

    def test_sign_out_revokes_token(self, db_session: Session, member):
        token, _ = sign_in(db_session, email=member.email, password="segredo123")
        sign_out(db_session, member)

        assert profile_from_token(db_session, token) is None

    def test_new_sign_in_replaces_old_token(self, db_session: Session, member):
        old_token, _ = sign_in(db_session, email=member.email, password="segredo123")
        new_token, _ = sign_in(db_session, email=member.email, password="segredo123")

        assert profile_from_token(db_session, old_token) is None
        assert profile_from_token(db_session, new_token).id == member.id

    def test_password_reset(self, db_session: Session, member):
        token = request_password_reset(db_session, member.email)
        reset_password(db_session, token=token, password="nova-senha")

        sign_in(db_session, email=member.email, password="nova-senha")
        with pytest.raises(InvalidResetTokenError):
            reset_password(db_session, token=token, password="outra-senha")

    def test_password_reset_unknown_email(self, db_session: Session):
        assert request_password_reset(db_session, "ninguem@example.com") is None

    def test_access_token_is_not_a_reset_token(self, db_session: Session, member):
        token, _ = sign_in(db_session, email=member.email, password="segredo123")

        with pytest.raises(InvalidResetTokenError):
            reset_password(db_session, token=token, password="nova-senha")


class TestProfileService:
    def test_set_role(self, db_session: Session, member):
        assert set_role(db_session, member.id, UserRole.COORDENADOR).is_staff is True

    def test_set_role_missing_profile(self, db_session: Session):
        with pytest.raises(NotFoundError):
            set_role(db_session, 9999, UserRole.ADMIN)


class TestMailer:
    def test_outbox_keeps_only_recent_messages(self):
        outbox_mailer = LoggingMailer(outbox_limit=3)
        for number in range(5):
            outbox_mailer.send(f"pessoa{number}@example.com", "Aviso", "Corpo")

        assert len(outbox_mailer.outbox) == 3
        assert [m.recipient for m in outbox_mailer.outbox] == [
            "pessoa2@example.com",
            "pessoa3@example.com",
            "pessoa4@example.com",
        ]


class TestUploads:
    def test_oversized_upload_is_not_read_in_full(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setattr("rcc_portal.utils.files.MAX_UPLOAD_BYTES", 10)
        upload = UploadFile(
            file=io.BytesIO(b"x" * 1000),
            filename="grande.gif",
            headers=Headers({"content-type": "image/gif"}),
        )

        with pytest.raises(InvalidUploadError):
            asyncio.run(save_upload(upload, "avatars", "1"))
        assert upload.file.tell() == 11

    def test_empty_upload_rejected(self):
        upload = UploadFile(
            file=io.BytesIO(b""),
            filename="vazio.gif",
            headers=Headers({"content-type": "image/gif"}),
        )

        with pytest.raises(InvalidUploadError):
            asyncio.run(save_upload(upload, "avatars", "1"))
