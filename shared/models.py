from pydantic import BaseModel, Field, field_validator
from typing import List, Optional, Dict, Any

# Модели привычек
class HabitUpdate(BaseModel):
    """Частичное обновление: незаданные поля сохраняют прежние значения"""
    name: Optional[str] = Field(None, max_length=120)
    icon: Optional[str] = Field(None, max_length=16)
    color: Optional[str] = None
    order_index: Optional[int] = None
    is_two_step: Optional[bool] = None
    schema_version: Optional[int] = Field(None, ge=1)

    @field_validator('color')
    @classmethod
    def validate_color(cls, v):
        if v is not None and not v.startswith('#'):
            raise ValueError('Цвет должен быть в формате #RRGGBB')
        return v

class HabitResponse(BaseModel):
    id: str
    user_id: str
    name: str
    icon: str
    color: str
    order_index: int
    is_two_step: bool
    created_at: str
    updated_at: str
    schema_version: int

class ReorderRequest(BaseModel):
    habit_ids: List[str]

# Модели отметок
class EntryUpdate(BaseModel):
    value: float
    fasting_hours: Optional[float] = Field(None, ge=0)
    note: Optional[str] = Field(None, max_length=1000)

class EntryResponse(BaseModel):
    id: str
    user_id: str
    habit_id: str
    date: str
    value: float
    fasting_hours: Optional[float] = None
    note: Optional[str] = None
    updated_at: str

# Модели аутентификации
class OtpRequest(BaseModel):
    email: str

    @field_validator('email')
    @classmethod
    def validate_email(cls, v):
        v = v.strip()
        if '@' not in v:
            raise ValueError('Неверный email')
        return v

class VerifyOtpRequest(OtpRequest):
    token: str = Field(..., min_length=1)

class UserResponse(BaseModel):
    id: str
    email: Optional[str] = None
    is_authenticated: bool = True

class LoginResponse(UserResponse):
    access_token: str
    token_type: str = "bearer"

class AuthStatus(BaseModel):
    ok: bool
    error: Optional[str] = None

# Служебные модели
class HealthCheck(BaseModel):
    status: str
    service: str
    version: str
    timestamp: float
    services: Dict[str, Any] = Field(default_factory=dict)
