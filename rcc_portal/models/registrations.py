from datetime import datetime
from typing import Optional

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rcc_portal.database.db import Base


class Registration(Base):
    __tablename__ = "inscricoes"
    __table_args__ = (UniqueConstraint("evento_id", "user_id", name="uq_inscricao_evento_user"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    evento_id: Mapped[int] = mapped_column(ForeignKey("eventos.id", ondelete="CASCADE"), nullable=False)
    user_id: Mapped[int] = mapped_column(ForeignKey("profiles.id"), nullable=False)
    confirmado: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    presente: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    dados_formulario: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    comprovante_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    event: Mapped["Event"] = relationship(back_populates="registrations")
    profile: Mapped["Profile"] = relationship(back_populates="registrations")
