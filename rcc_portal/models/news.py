from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from rcc_portal.database.db import Base


class NewsPost(Base):
    __tablename__ = "noticias"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    titulo: Mapped[str] = mapped_column(String(200), nullable=False)
    conteudo: Mapped[str] = mapped_column(Text, nullable=False)
    imagem_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    publicado: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    button_text: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    button_link: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    autor_id: Mapped[Optional[int]] = mapped_column(ForeignKey("profiles.id"), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
