from typing import Optional

from fastapi import APIRouter, HTTPException, Depends, status

from models.auth import AuthError, AuthUser
from services.auth_service import AuthService
from services.session_store import SessionStore
from shared.models import OtpRequest, VerifyOtpRequest, UserResponse, LoginResponse, AuthStatus
from ..dependencies import get_auth, get_bearer_token, get_current_user, get_services, get_sessions

router = APIRouter(prefix="/api/auth", tags=["auth"])

def _login_response(sessions: SessionStore, user: AuthUser) -> LoginResponse:
    session = sessions.create(user)
    return LoginResponse(id=user.id, email=user.email, access_token=session.token)

@router.get("/me", response_model=UserResponse)
def get_me(user: AuthUser = Depends(get_current_user)):
    return UserResponse(id=user.id, email=user.email)

@router.post("/otp", response_model=AuthStatus)
async def request_otp(payload: OtpRequest, auth: AuthService = Depends(get_auth)):
    """
    Отправить одноразовый код на email. Ошибка провайдера возвращается в теле ответа.
    """
    error = await auth.sign_in_with_otp(payload.email)
    return AuthStatus(ok=error is None, error=str(error) if error else None)

@router.post("/verify", response_model=LoginResponse)
async def verify_otp(
    payload: VerifyOtpRequest,
    auth: AuthService = Depends(get_auth),
    sessions: SessionStore = Depends(get_sessions)
):
    """
    Подтвердить код и получить токен для заголовка Authorization
    """
    try:
        provider_session = await auth.exchange_otp(payload.email, payload.token)
    except AuthError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))
    return _login_response(sessions, provider_session.user)

@router.post("/logout", response_model=AuthStatus)
def logout(
    token: Optional[str] = Depends(get_bearer_token),
    sessions: SessionStore = Depends(get_sessions)
):
    """
    Закрыть сессию текущего клиента. Сессии других клиентов не меняются.
    """
    sessions.revoke(token)
    return AuthStatus(ok=True)

@router.post("/dev-login", response_model=LoginResponse)
def dev_login(services=Depends(get_services)):
    """
    Вход фиксированным локальным пользователем без обращения к провайдеру
    """
    if not services.config.auth.dev_login_enabled:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")
    return _login_response(services.sessions, services.auth.dev_user)
