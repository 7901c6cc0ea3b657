import enum
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rcc_portal.database.db import Base


class UserRole(str, enum.Enum):
    ADMIN = "admin"
    COORDENADOR = "coordenador"
    SERVO = "servo"


STAFF_ROLES = frozenset({UserRole.ADMIN.value, UserRole.COORDENADOR.value})


class Profile(Base):
    __tablename__ = "profiles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    email: Mapped[str] = mapped_column(String(254), nullable=False, unique=True, index=True)
    nome: Mapped[str] = mapped_column(String(200), nullable=False)
    telefone: Mapped[Optional[str]] = mapped_column(String(40), nullable=True)
    endereco: Mapped[Optional[str]] = mapped_column(String(300), nullable=True)
    avatar_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    token_jti: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    role: Mapped[str] = mapped_column(String(16), nullable=False, default=UserRole.SERVO.value)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    registrations: Mapped[list["Registration"]] = relationship(back_populates="profile")

    @property
    def is_staff(self) -> bool:
        return self.role in STAFF_ROLES
