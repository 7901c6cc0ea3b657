from typing import Optional

from pydantic import BaseModel, Field, field_validator

from rcc_portal.schemas.common import not_null


class PrayerGroupCreate(BaseModel):
    nome: str = Field(min_length=2, max_length=200)
    descricao: Optional[str] = None
    horario: str = Field(min_length=1, max_length=100)
    local: str = Field(min_length=1, max_length=300)
    imagem_url: Optional[str] = None


class PrayerGroupUpdate(BaseModel):
    nome: Optional[str] = Field(default=None, min_length=2, max_length=200)
    descricao: Optional[str] = None
    horario: Optional[str] = Field(default=None, min_length=1, max_length=100)
    local: Optional[str] = Field(default=None, min_length=1, max_length=300)
    imagem_url: Optional[str] = None

    check_required = field_validator("nome", "horario", "local")(not_null)


class PrayerGroupOut(BaseModel):
    id: int
    nome: str
    descricao: Optional[str]
    horario: str
    local: str
    imagem_url: Optional[str]

    class Config:
        from_attributes = True
