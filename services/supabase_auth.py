# services/supabase_auth.py

import logging
from typing import Any, Dict, Optional

import aiohttp

from models.auth import AuthError, AuthEvent, AuthSession, AuthUser
from services.auth_service import AuthProvider

logger = logging.getLogger(__name__)

class SupabaseAuthProvider(AuthProvider):
    """Провайдер сессий Supabase (GoTrue REST API) на aiohttp"""

    def __init__(self, url: str, anon_key: str, session: Optional[AuthSession] = None,
                 timeout: int = 10):
        super().__init__()
        self.base_url = url.rstrip('/') + '/auth/v1'
        self.anon_key = anon_key
        self.session = session
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self._http: Optional[aiohttp.ClientSession] = None

    def _get_http(self) -> aiohttp.ClientSession:
        if self._http is None or self._http.closed:
            self._http = aiohttp.ClientSession(
                timeout=self.timeout,
                headers={'apikey': self.anon_key}
            )
        return self._http

    def _auth_headers(self) -> Dict[str, str]:
        if self.session is None:
            return {}
        return {'Authorization': f"Bearer {self.session.access_token}"}

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        http = self._get_http()
        try:
            async with http.request(method, f"{self.base_url}{path}", **kwargs) as response:
                if response.content_type == 'application/json':
                    body = await response.json()
                else:
                    body = await response.text()

                if response.status >= 400:
                    raise AuthError(_error_message(body), status=response.status)
                return body
        except aiohttp.ClientError as e:
            raise AuthError(f"Auth request failed: {e}") from e

    async def get_session(self) -> Optional[AuthSession]:
        if self.session is None:
            return None

        try:
            user_data = await self._request('GET', '/user', headers=self._auth_headers())
        except AuthError as e:
            if e.status == 401:
                logger.info("Stored session is no longer valid")
                self.session = None
                return None
            raise

        self.session.user = AuthUser.from_dict(user_data)
        return self.session

    async def sign_in_with_otp(self, email: str, redirect_to: Optional[str] = None) -> None:
        params = {'redirect_to': redirect_to} if redirect_to else None
        await self._request(
            'POST', '/otp',
            params=params,
            json={'email': email, 'create_user': True}
        )
        logger.info(f"OTP sent to {email}")

    async def verify_otp(self, email: str, token: str) -> AuthSession:
        data = await self._request(
            'POST', '/verify',
            json={'type': 'email', 'email': email, 'token': token}
        )
        try:
            self.session = AuthSession.from_dict(data)
        except (KeyError, TypeError) as e:
            raise AuthError(f"Unexpected verify response: {e}") from e

        self._emit(AuthEvent.SIGNED_IN, self.session)
        return self.session

    async def sign_out(self) -> None:
        if self.session is not None:
            headers = self._auth_headers()
            self.session = None
            try:
                await self._request('POST', '/logout', headers=headers)
            finally:
                self._emit(AuthEvent.SIGNED_OUT, None)
        else:
            self._emit(AuthEvent.SIGNED_OUT, None)

    async def close(self) -> None:
        if self._http is not None and not self._http.closed:
            await self._http.close()
        self._http = None

def _error_message(body: Any) -> str:
    if isinstance(body, dict):
        for key in ('msg', 'error_description', 'message', 'error'):
            if body.get(key):
                return str(body[key])
    if isinstance(body, str) and body:
        return body[:200]
    return "Auth provider error"
