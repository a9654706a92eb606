# models.py
from typing import Annotated, Literal

from pydantic import BaseModel, EmailStr, Field, StringConstraints

StationStatus = Literal["Active", "Inactive", "Maintenance"]
ConnectorType = Literal["Type1", "Type2", "CCS", "CHAdeMO", "GB/T"]

Name = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
# La contraseña se conserva tal cual, también en los espacios
Password = Annotated[str, StringConstraints(strip_whitespace=False, min_length=1)]


class StationBody(BaseModel):
    name: Name
    latitude: float
    longitude: float
    status: StationStatus
    powerOutput: float = Field(..., gt=0)
    connectorType: ConnectorType


class RegisterBody(BaseModel):
    name: Name
    email: EmailStr
    password: Password


class LoginBody(BaseModel):
    email: EmailStr
    password: Password
