from datetime import date, datetime
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from rcc_portal.models.events import EventType
from rcc_portal.schemas.common import not_null, optional_url
from rcc_portal.schemas.news import NewsOut
from rcc_portal.schemas.pagination import PageWindowOut

HORARIO_PATTERN = r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$"


class FieldConfig(BaseModel):
    required: bool = False


# ---------- Event ----------
class EventCreate(BaseModel):
    nome: str = Field(min_length=5, max_length=200)
    descricao: str = Field(min_length=20)
    data: date
    horario: str = Field(pattern=HORARIO_PATTERN)
    local: Optional[str] = None
    taxa_inscricao: Optional[float] = Field(default=0, ge=0)
    tipo: EventType = Field(default=EventType.FORMACAO, validate_default=True)
    imagem_url: Optional[str] = None
    obrigatorio: bool = False
    chave_pix: Optional[str] = None
    qr_code_url: Optional[str] = None
    whatsapp_link: Optional[str] = None
    registration_deadline: Optional[datetime] = None
    form_fields_config: dict[str, Any] = Field(default_factory=dict)

    class Config:
        use_enum_values = True

    check_whatsapp = field_validator("whatsapp_link")(optional_url)


class EventUpdate(BaseModel):
    nome: Optional[str] = Field(default=None, min_length=5, max_length=200)
    descricao: Optional[str] = Field(default=None, min_length=20)
    data: Optional[date] = None
    horario: Optional[str] = Field(default=None, pattern=HORARIO_PATTERN)
    local: Optional[str] = None
    taxa_inscricao: Optional[float] = Field(default=None, ge=0)
    tipo: Optional[EventType] = None
    imagem_url: Optional[str] = None
    obrigatorio: Optional[bool] = None
    chave_pix: Optional[str] = None
    qr_code_url: Optional[str] = None
    whatsapp_link: Optional[str] = None
    registration_deadline: Optional[datetime] = None
    form_fields_config: Optional[dict[str, Any]] = None

    class Config:
        use_enum_values = True

    check_whatsapp = field_validator("whatsapp_link")(optional_url)
    check_required = field_validator(
        "nome", "data", "horario", "tipo", "obrigatorio", "form_fields_config"
    )(not_null)


class EventOut(BaseModel):
    id: int
    nome: str
    descricao: Optional[str]
    data: date
    horario: str
    local: Optional[str]
    taxa_inscricao: Optional[float]
    tipo: str
    imagem_url: Optional[str]
    obrigatorio: bool
    chave_pix: Optional[str]
    qr_code_url: Optional[str]
    whatsapp_link: Optional[str]
    registration_deadline: Optional[datetime]
    form_fields_config: dict[str, FieldConfig]
    registration_open: bool
    autor_id: Optional[int]
    created_at: datetime

    class Config:
        from_attributes = True


class EventListOut(BaseModel):
    items: list[EventOut]
    total: int
    page: int
    page_size: int
    pagination: PageWindowOut


class HomeOut(BaseModel):
    events: list[EventOut]
    news: list[NewsOut]


class EventStatsOut(BaseModel):
    event_id: int
    total: int
    confirmed: int
    present: int
    pending_payment: int


class FormFieldOut(BaseModel):
    key: str
    label: str
    kind: str
    required: bool
    conditional: bool


class RegistrationFormOut(BaseModel):
    event_id: int
    guardian_policy: str
    fields: list[FormFieldOut]
