import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from pymongo.errors import PyMongoError
from starlette.exceptions import HTTPException as StarletteHTTPException

from evstations.api import router as api_router
from evstations.auth.session import NotAuthenticated, is_public_path, resolve_user
from evstations.config import get_settings
from evstations.dependencies import get_user_store
from evstations.services.errors import InternalError, classify_store_error, error_payload

settings = get_settings()

# ==== Logging policy (silence logs in production) ====
LOG_LEVEL = getattr(logging, settings.log_level, logging.WARNING)
logging.basicConfig(level=LOG_LEVEL)

# Reduce noisy third‑party loggers
for name in ("pymongo", "uvicorn", "uvicorn.error"):
    logging.getLogger(name).setLevel(LOG_LEVEL)

# Access log (HTTP request per line) can leak info; disable by default
if settings.access_log_disabled:
    al = logging.getLogger("uvicorn.access")
    al.setLevel(logging.CRITICAL)
    al.propagate = False
    al.disabled = True
    al.handlers = []

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.use_in_memory_db:
        logger.warning("USE_IN_MEMORY_DB activo; los datos no se persisten")
    else:
        from evstations.database.database import ensure_indexes

        # Sin MONGO_URI get_client() lanza RuntimeError y la app no arranca
        try:
            ensure_indexes()
            logger.info("Índices de MongoDB verificados")
        except PyMongoError as e:
            logger.error(f"No se pudieron crear los índices: {e}")
    yield


app = FastAPI(title="EV Charging Stations API", lifespan=lifespan)

app.include_router(api_router, prefix="/api")


# ============ Auth middleware (cookie-based) ============
@app.middleware("http")
async def auth_gate(request: Request, call_next):
    if request.method == "OPTIONS" or is_public_path(request.url.path):
        return await call_next(request)

    users = request.app.dependency_overrides.get(get_user_store, get_user_store)()
    try:
        request.state.user = resolve_user(request, users)
    except NotAuthenticated as e:
        return JSONResponse(status_code=401, content={"success": False, "message": e.message})
    except PyMongoError as e:
        logger.error(f"Error resolviendo usuario de la sesión: {e}")
        err = classify_store_error(e)
        return JSONResponse(status_code=err.status_code, content=error_payload(err, get_settings().expose_error_details))
    return await call_next(request)


# CORS se registra después de auth_gate para envolverlo (los 401 llevan cabeceras CORS)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.client_url],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = []
    for e in exc.errors():
        field = ".".join(str(p) for p in e.get("loc", ()) if p != "body")
        errors.append(f"{field}: {e.get('msg')}" if field else e.get("msg"))
    return JSONResponse(status_code=400, content={"success": False, "message": errors})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"success": False, "message": exc.detail})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Error no controlado en {request.method} {request.url.path}")
    err = InternalError("An unexpected error occurred", cause=exc)
    return JSONResponse(status_code=err.status_code, content=error_payload(err, get_settings().expose_error_details))


@app.get("/")
def root():
    return PlainTextResponse("EV Charging Stations API")
