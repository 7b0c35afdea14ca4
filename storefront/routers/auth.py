"""
# `storefront/routers/auth.py` - Signup & Login

## `POST /signup`
Body: `{"email": "..."}`
1. A random 10-character password is generated.
2. The Firebase Authentication user is created with it (Firebase stores the
   salted hash, the server keeps nothing).
3. The password is e-mailed to the user.

## `POST /login`
Body: `{"email": "...", "password": "..."}`
Proxies to the Identity Toolkit `signInWithPassword` REST endpoint and returns
`id_token` / `refresh_token`. The id token is also set on the `Authorization`
response header as `Bearer <id_token>`; that token is what every `/api/*`
endpoint expects.
"""
import logging
import secrets
import string
from typing import Tuple

import httpx
from fastapi import APIRouter, Depends, Request, Response
from firebase_admin import auth as firebase_auth
from starlette.concurrency import run_in_threadpool

from storefront.core.errors import DownstreamFailure, StorefrontError, Unauthorized, ValidationError
from storefront.routers.deps import get_mailer
from storefront.schemas.user import LoginResponse, SignupRequest, SignupResponse, UserCredentials

logger = logging.getLogger("storefront.auth")

router = APIRouter(tags=["Auth"])

FIREBASE_SIGNIN_ENDPOINT = "https://identitytoolkit.googleapis.com/v1/accounts:signInWithPassword"

PASSWORD_ALPHABET = string.ascii_letters + string.digits
PASSWORD_LENGTH = 10


def generate_random_password(length: int = PASSWORD_LENGTH) -> str:
    return "".join(secrets.choice(PASSWORD_ALPHABET) for _ in range(length))


async def _sign_in_with_password(api_key: str, email: str, password: str) -> Tuple[int, dict]:
    payload = {"email": email, "password": password, "returnSecureToken": True}
    async with httpx.AsyncClient(timeout=10) as client:
        resp = await client.post(FIREBASE_SIGNIN_ENDPOINT, params={"key": api_key}, json=payload)
    return resp.status_code, resp.json()


@router.post("/signup", response_model=SignupResponse)
async def signup(payload: SignupRequest, mailer=Depends(get_mailer)):
    password = generate_random_password()
    try:
        user = await run_in_threadpool(firebase_auth.create_user, email=payload.email, password=password)
    except firebase_auth.EmailAlreadyExistsError:
        raise ValidationError("This e-mail is already registered")
    except Exception as exc:
        logger.error("Firebase user creation failed for %s: %s", payload.email, exc)
        raise DownstreamFailure("Failed to register user") from exc

    try:
        await mailer.send_mail(payload.email, "Your Password", f"Your password is: {password}")
    except Exception as exc:
        logger.exception("Failed to send password e-mail to %s", payload.email)
        raise DownstreamFailure("User registered but the password e-mail could not be sent") from exc

    logger.info("User %s registered", user.uid)
    return SignupResponse(user_id=user.uid, email=payload.email)


@router.post("/login", response_model=LoginResponse)
async def login(credentials: UserCredentials, request: Request, response: Response):
    """Proxies to Firebase with e-mail + password, returns id_token + refresh_token."""
    api_key = request.app.state.settings.firebase_web_api_key
    if not api_key:
        raise StorefrontError("Server misconfigured: missing FIREBASE_WEB_API_KEY")

    try:
        status_code, data = await _sign_in_with_password(api_key, credentials.email, credentials.password)
    except (httpx.HTTPError, ValueError) as exc:
        # ValueError: upstream answered with a non-JSON body
        logger.exception("Login proxy failed")
        raise DownstreamFailure(f"Login service error: {exc}") from exc

    if status_code != 200:
        message = (data.get("error") or {}).get("message", "Invalid credentials")
        logger.info("Firebase login failed for %s: %s", credentials.email, message)
        raise Unauthorized("Authentication failed")

    response.headers["Authorization"] = f"Bearer {data['idToken']}"
    return LoginResponse(
        id_token=data["idToken"],
        refresh_token=data["refreshToken"],
        expires_in=int(data["expiresIn"]),
        user_id=data["localId"],
    )
