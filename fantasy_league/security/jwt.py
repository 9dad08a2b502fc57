"""HS256 session tokens for the fantasy API, carried in an httpOnly cookie."""
from datetime import datetime, timedelta, timezone
import base64
import hashlib
import hmac
import json

from fantasy_league.config import get_settings

ALGORITHM = "HS256"
TOKEN_TYPE = "session"


class AccessTokenError(ValueError):
    pass


def _encode_segment(data: dict) -> str:
    raw = json.dumps(data, separators=(",", ":"), sort_keys=True).encode("utf-8")
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def _decode_segment(segment: str) -> dict:
    padded = segment + "=" * (-len(segment) % 4)
    return json.loads(base64.urlsafe_b64decode(padded.encode("ascii")))


def _signature(signing_input: str) -> str:
    secret = get_settings().jwt_secret.encode("utf-8")
    digest = hmac.new(secret, signing_input.encode("ascii"), hashlib.sha256).digest()
    return base64.urlsafe_b64encode(digest).rstrip(b"=").decode("ascii")


def create_access_token(user_id: int, expires_in: timedelta | None = None) -> str:
    """Issue a signed token whose subject is the user id."""
    settings = get_settings()
    issued_at = datetime.now(timezone.utc)
    expires_at = issued_at + (expires_in or timedelta(minutes=settings.access_token_ttl_minutes))

    header = _encode_segment({"alg": ALGORITHM, "typ": "JWT"})
    payload = _encode_segment({
        "sub": str(user_id),
        "typ": TOKEN_TYPE,
        "iat": int(issued_at.timestamp()),
        "exp": int(expires_at.timestamp()),
    })
    signing_input = f"{header}.{payload}"
    return f"{signing_input}.{_signature(signing_input)}"


def decode_access_token(token: str) -> int:
    """
    Verify ``token`` and return the user id it was issued for.

    Raises:
        AccessTokenError: malformed, tampered, expired or foreign tokens
    """
    parts = token.split(".") if token else []
    if len(parts) != 3:
        raise AccessTokenError("Malformed token")
    header_segment, payload_segment, signature = parts

    if not hmac.compare_digest(signature, _signature(f"{header_segment}.{payload_segment}")):
        raise AccessTokenError("Invalid token signature")

    try:
        header = _decode_segment(header_segment)
        payload = _decode_segment(payload_segment)
    except ValueError as exc:
        raise AccessTokenError("Malformed token payload") from exc

    if header.get("alg") != ALGORITHM or payload.get("typ") != TOKEN_TYPE:
        raise AccessTokenError("Unexpected token type")

    expires_at = payload.get("exp")
    if not isinstance(expires_at, int) or datetime.now(timezone.utc).timestamp() >= expires_at:
        raise AccessTokenError("Token has expired")

    try:
        return int(payload["sub"])
    except (KeyError, TypeError, ValueError) as exc:
        raise AccessTokenError("Token subject is missing") from exc
