from typing import Optional

from fastapi import HTTPException, Request

from evstations.auth.security import TOKEN_COOKIE, verify_token
from evstations.database.user_store import UserStore

# Rutas /api/ accesibles sin sesión
PUBLIC_API_PATHS = (
    "/api/auth/register",
    "/api/auth/login",
    "/api/auth/logout",
    "/api/charging-stations/seed",
)


class NotAuthenticated(Exception):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


def is_public_path(path: str) -> bool:
    if not path.startswith("/api/"):
        return True
    return path.rstrip("/") in PUBLIC_API_PATHS


def resolve_user(request: Request, users: UserStore) -> dict:
    """Usuario autenticado a partir de la cookie de sesión (sin hash de password)."""
    token = request.cookies.get(TOKEN_COOKIE)
    if not token:
        raise NotAuthenticated("Not authorized, no token found")
    uid = verify_token(token)
    if not uid:
        raise NotAuthenticated("Not authorized, invalid token")
    user = users.find_by_id(uid)
    if not user:
        raise NotAuthenticated("Not authorized, user not found")
    return user


def current_user(request: Request) -> dict:
    user: Optional[dict] = getattr(request.state, "user", None)
    if not user:
        raise HTTPException(status_code=401, detail="Not authorized")
    return user
