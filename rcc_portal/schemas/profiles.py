from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field

from rcc_portal.models.profiles import UserRole


class ProfileOut(BaseModel):
    id: int
    email: str
    nome: str
    telefone: Optional[str]
    endereco: Optional[str]
    avatar_url: Optional[str]
    role: str
    created_at: datetime

    class Config:
        from_attributes = True


class ProfileUpdate(BaseModel):
    nome: str = Field(min_length=2, max_length=200)
    telefone: Optional[str] = Field(default=None, max_length=40)
    endereco: Optional[str] = Field(default=None, max_length=300)


class RoleUpdate(BaseModel):
    role: UserRole


class MyRegistrationEventOut(BaseModel):
    id: int
    nome: str
    tipo: str
    data: date
    obrigatorio: bool

    class Config:
        from_attributes = True


class MyRegistrationOut(BaseModel):
    id: int
    confirmado: bool
    presente: bool
    created_at: datetime
    event: MyRegistrationEventOut

    class Config:
        from_attributes = True
