"""Pydantic schemas for authentication."""

from chiccloset.core.database import User
from chiccloset.core.schemas import CamelModel


class LoginRequest(CamelModel):
    """Schema for email/password login."""

    email: str
    password: str


class UserPublic(CamelModel):
    """A user as returned to clients (no password)."""

    id: int
    email: str
    name: str

    @classmethod
    def from_user(cls, user: User) -> "UserPublic":
        return cls(id=user.id, email=user.email, name=user.name)


class LoginResponse(CamelModel):
    """Successful login payload."""

    success: bool = True
    user: UserPublic
    token: str
