# app/domain/auth.py
from dataclasses import dataclass
from enum import Enum


class Role(str, Enum):
    USER = "USER"
    ADMIN = "ADMIN"


@dataclass(frozen=True)
class CurrentUser:
    """Tozsamosc przekazana przez gateway (auth poza tym serwisem)."""

    id: int
    role: Role = Role.USER
