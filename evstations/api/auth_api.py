import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pymongo.errors import DuplicateKeyError

from evstations.auth.security import TOKEN_COOKIE, cookie_settings, hash_password, make_token, verify_password
from evstations.auth.session import current_user
from evstations.database.user_store import UserStore
from evstations.dependencies import get_user_store
from evstations.models.models import LoginBody, RegisterBody

logger = logging.getLogger(__name__)

router = APIRouter()


def _public_user(user: dict) -> dict:
    return {"name": user.get("name"), "email": user.get("email")}


def _with_session(response: JSONResponse, user: dict) -> JSONResponse:
    token = make_token(str(user["_id"]), user["email"])
    response.set_cookie(TOKEN_COOKIE, token, **cookie_settings())
    return response


@router.post("/auth/register", tags=["auth"])
def register(body: RegisterBody, users: UserStore = Depends(get_user_store)):
    if users.find_by_email(body.email):
        return JSONResponse(status_code=400, content={"success": False, "message": "User already exists"})
    try:
        user = users.create(body.name, body.email, hash_password(body.password))
    except DuplicateKeyError:
        return JSONResponse(status_code=400, content={"success": False, "message": "User already exists"})
    logger.info("Usuario registrado: %s", user["email"])
    response = JSONResponse(status_code=201, content={"success": True, "data": {"user": _public_user(user)}})
    return _with_session(response, user)


@router.post("/auth/login", tags=["auth"])
def login(body: LoginBody, users: UserStore = Depends(get_user_store)):
    user = users.find_by_email(body.email)
    if not user or not verify_password(body.password, user.get("password_hash", "")):
        return JSONResponse(status_code=400, content={"success": False, "message": "Invalid email or password"})
    response = JSONResponse(
        status_code=200,
        content={
            "success": True,
            "message": f"Welcome back, {user.get('name')}!",
            "data": {"user": _public_user(user)},
        },
    )
    return _with_session(response, user)


@router.post("/auth/logout", tags=["auth"])
def logout():
    response = JSONResponse(status_code=200, content={"success": True, "message": "Logged out successfully"})
    response.delete_cookie(TOKEN_COOKIE, path=cookie_settings()["path"])
    return response


@router.get("/auth/me", tags=["auth"])
def me(request: Request):
    user = current_user(request)
    return {"success": True, "data": {"user": {"id": str(user["_id"]), **_public_user(user)}}}
