import asyncio

from aiohttp import web
from aiohttp.test_utils import TestServer

from models.auth import AuthError, AuthEvent, AuthSession, AuthUser
from services.supabase_auth import SupabaseAuthProvider

USER_JSON = {
    "id": "alice-id",
    "email": "alice@example.com",
    "aud": "authenticated",
    "app_metadata": {"provider": "email"},
    "user_metadata": {},
    "created_at": "2024-01-01T00:00:00Z",
}


def make_gotrue_app(calls):
    async def otp(request):
        calls.append(("otp", request.headers.get("apikey"), request.query.get("redirect_to"),
                      await request.json()))
        body = await request.json()
        if body["email"] == "blocked@example.com":
            return web.json_response({"msg": "Email rate limit exceeded"}, status=429)
        return web.json_response({})

    async def verify(request):
        body = await request.json()
        calls.append(("verify", body))
        if body["token"] != "123456":
            return web.json_response(
                {"error_description": "Token has expired or is invalid"}, status=403
            )
        return web.json_response({
            "access_token": "good",
            "refresh_token": "refresh",
            "expires_in": 3600,
            "user": USER_JSON,
        })

    async def user(request):
        calls.append(("user", request.headers.get("Authorization")))
        if request.headers.get("Authorization") != "Bearer good":
            return web.json_response({"msg": "invalid JWT"}, status=401)
        return web.json_response(USER_JSON)

    async def logout(request):
        calls.append(("logout", request.headers.get("Authorization")))
        return web.Response(status=204)

    app = web.Application()
    app.add_routes([
        web.post("/auth/v1/otp", otp),
        web.post("/auth/v1/verify", verify),
        web.get("/auth/v1/user", user),
        web.post("/auth/v1/logout", logout),
    ])
    return app


def run_with_provider(scenario, session=None):
    calls = []

    async def runner():
        async with TestServer(make_gotrue_app(calls)) as server:
            provider = SupabaseAuthProvider(str(server.make_url("/")), "anon", session=session)
            try:
                return await scenario(provider)
            finally:
                await provider.close()

    return asyncio.run(runner()), calls


def test_sign_in_with_otp_sends_email_and_redirect():
    async def scenario(provider):
        await provider.sign_in_with_otp("alice@example.com", redirect_to="http://localhost:5173")

    _, calls = run_with_provider(scenario)

    assert calls == [(
        "otp", "anon", "http://localhost:5173",
        {"email": "alice@example.com", "create_user": True},
    )]


def test_otp_error_is_mapped_to_auth_error():
    async def scenario(provider):
        try:
            await provider.sign_in_with_otp("blocked@example.com")
        except AuthError as e:
            return e

    error, _ = run_with_provider(scenario)

    assert error.status == 429
    assert error.message == "Email rate limit exceeded"


def test_verify_otp_opens_session_and_emits_signed_in():
    events = []

    async def scenario(provider):
        provider.on_auth_state_change(lambda event, session: events.append((event, session)))
        session = await provider.verify_otp("alice@example.com", "123456")
        current = await provider.get_session()
        return session, current

    (session, current), calls = run_with_provider(scenario)

    assert session.access_token == "good"
    assert session.user.id == "alice-id"
    assert current.user.email == "alice@example.com"
    assert events == [(AuthEvent.SIGNED_IN, session)]
    assert ("user", "Bearer good") in calls


def test_verify_with_bad_token_fails():
    async def scenario(provider):
        try:
            await provider.verify_otp("alice@example.com", "000000")
        except AuthError as e:
            return e, provider.session

    (error, session), _ = run_with_provider(scenario)

    assert error.status == 403
    assert "expired" in error.message
    assert session is None


def test_get_session_without_stored_session_skips_network():
    async def scenario(provider):
        return await provider.get_session()

    result, calls = run_with_provider(scenario)

    assert result is None
    assert calls == []


def test_invalid_stored_session_is_dropped():
    stale = AuthSession(access_token="stale", user=AuthUser(id="alice-id"))

    async def scenario(provider):
        return await provider.get_session(), provider.session

    (result, stored), _ = run_with_provider(scenario, session=stale)

    assert result is None
    assert stored is None


def test_sign_out_calls_logout_and_emits_signed_out():
    events = []
    session = AuthSession(access_token="good", user=AuthUser(id="alice-id"))

    async def scenario(provider):
        provider.on_auth_state_change(lambda event, s: events.append(event))
        await provider.sign_out()
        return provider.session

    stored, calls = run_with_provider(scenario, session=session)

    assert stored is None
    assert calls == [("logout", "Bearer good")]
    assert events == [AuthEvent.SIGNED_OUT]


def test_unreachable_provider_raises_auth_error():
    async def scenario():
        provider = SupabaseAuthProvider("http://127.0.0.1:1", "anon", timeout=2)
        try:
            await provider.sign_in_with_otp("alice@example.com")
        except AuthError as e:
            return e
        finally:
            await provider.close()

    error = asyncio.run(scenario())

    assert isinstance(error, AuthError)
    assert error.status is None
