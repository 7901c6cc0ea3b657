from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field


class RegistrationCreate(BaseModel):
    dados_formulario: dict[str, Any] = Field(default_factory=dict)


class RegistrationOut(BaseModel):
    id: int
    evento_id: int
    user_id: int
    confirmado: bool
    presente: bool
    dados_formulario: dict[str, Any]
    comprovante_url: Optional[str]
    created_at: datetime

    class Config:
        from_attributes = True


class PixInfoOut(BaseModel):
    taxa_inscricao: float
    chave_pix: Optional[str]
    qr_code_url: Optional[str]


class MyEventRegistrationOut(BaseModel):
    registration: RegistrationOut
    pix: Optional[PixInfoOut] = None


class RegistrantOut(BaseModel):
    nome: str
    email: str
    telefone: Optional[str]
    endereco: Optional[str]

    class Config:
        from_attributes = True


class EventRegistrationOut(RegistrationOut):
    profile: RegistrantOut


class RegistrationFlagsUpdate(BaseModel):
    confirmado: Optional[bool] = None
    presente: Optional[bool] = None
