import enum
from datetime import date, datetime, timezone
from typing import Optional

from sqlalchemy import JSON, Boolean, Date, DateTime, ForeignKey, Integer, Numeric, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rcc_portal.database.db import Base


class EventType(str, enum.Enum):
    FORMACAO = "formacao"
    RETIRO = "retiro"
    REUNIAO = "reuniao"
    EXPERIENCIA_ORACAO = "experiencia_oracao"
    INTRODUCAO_DONS = "introducao_dons"


EVENT_TYPE_LABELS = {
    EventType.FORMACAO.value: "Formação",
    EventType.RETIRO.value: "Retiro",
    EventType.REUNIAO.value: "Reunião",
    EventType.EXPERIENCIA_ORACAO.value: "Experiência de Oração",
    EventType.INTRODUCAO_DONS.value: "Introdução aos Dons",
}


class Event(Base):
    __tablename__ = "eventos"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    nome: Mapped[str] = mapped_column(String(200), nullable=False)
    descricao: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    data: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    horario: Mapped[str] = mapped_column(String(5), nullable=False)
    local: Mapped[Optional[str]] = mapped_column(String(300), nullable=True)
    taxa_inscricao: Mapped[Optional[float]] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=True)
    tipo: Mapped[str] = mapped_column(String(32), nullable=False, default=EventType.FORMACAO.value)
    imagem_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    obrigatorio: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    chave_pix: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    qr_code_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    whatsapp_link: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    registration_deadline: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    form_fields_config: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    autor_id: Mapped[Optional[int]] = mapped_column(ForeignKey("profiles.id"), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    registrations: Mapped[list["Registration"]] = relationship(
        back_populates="event", cascade="all, delete-orphan"
    )

    @property
    def has_fee(self) -> bool:
        return bool(self.taxa_inscricao and self.taxa_inscricao > 0)

    def is_registration_open(self, now: Optional[datetime] = None) -> bool:
        if self.registration_deadline is None:
            return True
        now = now or datetime.now(timezone.utc)
        return _as_utc(self.registration_deadline) > _as_utc(now)

    @property
    def registration_open(self) -> bool:
        return self.is_registration_open()


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
