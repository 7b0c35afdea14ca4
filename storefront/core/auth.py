# storefront/core/auth.py
from typing import Optional
from fastapi import Request
from firebase_admin import auth as fb_auth
from storefront.core.errors import Unauthorized
from storefront.schemas.principal import Principal

MOCK_TOKEN_PREFIX = "mock_jwt_token_"

def _extract_bearer_token(request: Request) -> Optional[str]:
    """
    Reads the token from the `Authorization: Bearer <id_token>` header.
    Returns None when absent.
    """
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        return None
    parts = auth_header.split()
    if len(parts) == 2 and parts[0].lower() == "bearer":
        return parts[1]
    return None

def _decode_id_token(id_token: str, allow_mock: bool) -> dict:
    """
    Firebase ID token verification.
    Mock tokens are accepted only when ALLOW_MOCK_TOKENS is on (development).
    Invalid/revoked/expired tokens raise Unauthorized.
    """
    if id_token.startswith(MOCK_TOKEN_PREFIX):
        if not allow_mock:
            raise Unauthorized("Mock tokens are disabled")
        return _decode_mock_token(id_token)

    try:
        return fb_auth.verify_id_token(id_token, check_revoked=True)
    except fb_auth.ExpiredIdTokenError:
        raise Unauthorized("Token expired")
    except fb_auth.RevokedIdTokenError:
        raise Unauthorized("Session revoked")
    except Exception as exc:
        raise Unauthorized(f"Invalid Firebase ID token: {exc}")

def _decode_mock_token(mock_token: str) -> dict:
    """
    Decodes a mock token.
    Format: mock_jwt_token_<uid>; a uid that looks like an e-mail is used as the e-mail too.
    """
    uid = mock_token[len(MOCK_TOKEN_PREFIX):]
    if not uid:
        raise Unauthorized("Invalid mock token format")

    return {
        "uid": uid,
        "user_id": uid,
        "email": uid if "@" in uid else None,
        "name": None,
        "firebase": {
            "sign_in_provider": "anonymous" if "anonymous" in uid else "password"
        },
        "admin": False,
    }

def _token_to_principal(decoded: dict) -> Principal:
    """
    Builds a Principal from the token.
    - anonymous provider → role='guest'
    - custom claim admin=True → role='admin'
    - everything else → role='user'
    """
    uid = decoded.get("uid") or decoded.get("user_id")
    if not uid:
        raise Unauthorized("Token missing uid.")

    firebase_info = decoded.get("firebase") or {}
    provider = firebase_info.get("sign_in_provider")
    is_admin = bool(decoded.get("admin") is True)

    if provider == "anonymous":
        role = "guest"
    elif is_admin:
        role = "admin"
    else:
        role = "user"

    return Principal(
        uid=uid,
        role=role,
        email=decoded.get("email"),
        display_name=decoded.get("name"),
    )

# --------- FastAPI Dependencies --------- #

async def get_principal(request: Request) -> Principal:
    """
    Token required: verifies it and returns the Principal.
    (guest/user/admin are all accepted)
    """
    token = _extract_bearer_token(request)
    if not token:
        raise Unauthorized("Missing Authorization header.")
    settings = request.app.state.settings
    decoded = _decode_id_token(token, allow_mock=settings.allow_mock_tokens)
    return _token_to_principal(decoded)
