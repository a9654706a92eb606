import time
from typing import Optional

import jwt
from passlib.context import CryptContext

from evstations.config import get_settings

TOKEN_COOKIE = "token"

pctx = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pctx.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    try:
        return pctx.verify(password, hashed)
    except (ValueError, TypeError):
        return False


def make_token(user_id: str, email: str) -> str:
    settings = get_settings()
    now = int(time.time())
    payload = {"sub": user_id, "email": email, "iat": now, "exp": now + settings.jwt_ttl}
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_alg)


def decode_token(token: str) -> Optional[dict]:
    settings = get_settings()
    try:
        return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_alg])
    except jwt.PyJWTError:
        return None


def verify_token(token: str) -> Optional[str]:
    data = decode_token(token)
    if not data:
        return None
    return data.get("sub")


def cookie_settings() -> dict:
    # Secure solo en producción (https)
    settings = get_settings()
    return dict(
        httponly=True,
        secure=settings.is_production,
        samesite="strict",
        max_age=settings.jwt_ttl,
        path="/",
    )
