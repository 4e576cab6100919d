# tailorcraft/schemas/auth.py
# Схемы входа и регистрации.
from typing import Annotated, Optional

from pydantic import Field, StringConstraints

from tailorcraft.models.user import RoleEnum
from tailorcraft.schemas.common import CamelModel


class LoginRequest(CamelModel):
    email: str
    # демо-провайдер пароль не проверяет
    password: Optional[str] = None


class RegisterRequest(CamelModel):
    # пробелы срезаются до проверки длины
    name: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
    email: str = Field(min_length=3)
    password: str = Field(min_length=6)


class UserOut(CamelModel):
    id: str
    name: str
    role: RoleEnum


class LoginResponse(CamelModel):
    token: str
    user: UserOut
