from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from rcc_portal.schemas.common import not_null, optional_url
from rcc_portal.schemas.pagination import PageWindowOut


# ---------- News ----------
class NewsCreate(BaseModel):
    titulo: str = Field(min_length=5, max_length=200)
    conteudo: str = Field(min_length=20)
    imagem_url: Optional[str] = None
    publicado: bool = True
    button_text: Optional[str] = Field(default=None, max_length=100)
    button_link: Optional[str] = None

    check_button_link = field_validator("button_link")(optional_url)


class NewsUpdate(BaseModel):
    titulo: Optional[str] = Field(default=None, min_length=5, max_length=200)
    conteudo: Optional[str] = Field(default=None, min_length=20)
    imagem_url: Optional[str] = None
    publicado: Optional[bool] = None
    button_text: Optional[str] = Field(default=None, max_length=100)
    button_link: Optional[str] = None

    check_button_link = field_validator("button_link")(optional_url)
    check_required = field_validator("titulo", "conteudo", "publicado")(not_null)


class NewsOut(BaseModel):
    id: int
    titulo: str
    conteudo: str
    imagem_url: Optional[str]
    publicado: bool
    button_text: Optional[str]
    button_link: Optional[str]
    autor_id: Optional[int]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class NewsSummaryOut(BaseModel):
    id: int
    titulo: str
    publicado: bool
    created_at: datetime

    class Config:
        from_attributes = True


class NewsListOut(BaseModel):
    items: list[NewsOut]
    total: int
    page: int
    page_size: int
    pagination: PageWindowOut
