from fantasy_league.security.jwt import AccessTokenError, create_access_token, decode_access_token
from fantasy_league.security.passwords import hash_password, verify_password

__all__ = [
    "AccessTokenError",
    "create_access_token",
    "decode_access_token",
    "hash_password",
    "verify_password",
]
