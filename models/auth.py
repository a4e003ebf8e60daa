# models/auth.py

from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Optional, Dict, Any

class AuthEvent(Enum):
    """События изменения сессии от провайдера"""
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"
    TOKEN_REFRESHED = "TOKEN_REFRESHED"
    USER_UPDATED = "USER_UPDATED"

class AuthError(Exception):
    """Ошибка провайдера аутентификации"""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status = status

    def __str__(self) -> str:
        if self.status is not None:
            return f"{self.message} (HTTP {self.status})"
        return self.message

@dataclass
class AuthUser:
    """Пользователь, возвращаемый провайдером"""
    id: str
    email: Optional[str] = None
    app_metadata: Dict[str, Any] = field(default_factory=dict)
    user_metadata: Dict[str, Any] = field(default_factory=dict)
    aud: str = "authenticated"
    created_at: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AuthUser":
        return cls(
            id=str(data["id"]),
            email=data.get("email"),
            app_metadata=data.get("app_metadata") or {},
            user_metadata=data.get("user_metadata") or {},
            aud=data.get("aud") or "authenticated",
            created_at=data.get("created_at"),
        )

@dataclass
class AuthSession:
    """Активная сессия провайдера"""
    access_token: str
    user: AuthUser
    refresh_token: Optional[str] = None
    expires_in: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AuthSession":
        return cls(
            access_token=data["access_token"],
            refresh_token=data.get("refresh_token"),
            expires_in=data.get("expires_in"),
            user=AuthUser.from_dict(data["user"]),
        )
