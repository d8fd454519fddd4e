from __future__ import annotations

from enum import Enum
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class Role(str, Enum):
    EMPLOYEE = "employee"
    OBSERVER = "observer"
    MANAGER = "manager"
    OWNER = "owner"


class DealershipRef(BaseModel):
    id: int
    name: str
    address: str | None = None


class Dealership(DealershipRef):
    phone: str | None = None
    timezone: str | None = None
    created_at: str | None = None
    updated_at: str | None = None


class User(BaseModel):
    id: int
    role: Role
    login: str | None = None
    full_name: str | None = None
    dealership_id: int | None = None
    phone: str | None = None
    phone_number: str | None = None
    dealerships: List[DealershipRef] = Field(default_factory=list)
    dealership: DealershipRef | None = None


class LoginRequest(BaseModel):
    login: str
    password: str


class LoginResponse(BaseModel):
    token: str
    user: User
    message: str | None = None


class PaginatedResponse(BaseModel, Generic[T]):
    data: List[T] = Field(default_factory=list)
    current_page: int = 1
    last_page: int = 1
    per_page: int = 15
    total: int = 0


class SessionRecord(BaseModel):
    token: str | None = None
    user: Optional[User] = None
    is_authenticated: bool = False


class WorkspaceRecord(BaseModel):
    selected_dealership_id: int | None = None
    has_initialized: bool = False
