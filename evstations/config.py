from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional
from urllib.parse import quote_plus

from dotenv import load_dotenv

# Carga variables desde .env si está presente
load_dotenv()


def _get_env_bool(name: str, default: bool) -> bool:
    return os.getenv(name, str(default)).strip().lower() in ("1", "true", "yes")


def _get_env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


def _build_mongo_uri() -> Optional[str]:
    """URI de MongoDB; se permite construirla desde componentes para manejar passwords con encoding."""
    uri = os.getenv("MONGO_URI")
    if uri:
        return uri
    user = os.getenv("MONGO_USER")
    password = os.getenv("MONGO_PASSWORD")
    host = os.getenv("MONGO_HOST")  # p.ej. cluster0.abcde.mongodb.net
    if not (user and password and host):
        return None
    params = os.getenv("MONGO_OPTIONS", "retryWrites=true&w=majority")
    app_name = os.getenv("MONGO_APP_NAME")
    if app_name:
        params += f"&appName={quote_plus(app_name)}"
    return f"mongodb+srv://{quote_plus(user)}:{quote_plus(password)}@{host}/?{params}"


@dataclass(frozen=True)
class Settings:
    mongo_uri: Optional[str]
    db_name: str
    jwt_secret: str
    jwt_alg: str
    jwt_ttl: int
    app_env: str
    client_url: str
    log_level: str
    access_log_disabled: bool
    use_in_memory_db: bool
    seed_owner_id: str

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @property
    def expose_error_details(self) -> bool:
        # El detalle de errores internos solo se muestra fuera de producción
        return not self.is_production


@lru_cache
def get_settings() -> Settings:
    return Settings(
        mongo_uri=_build_mongo_uri(),
        db_name=os.getenv("DB_NAME", "ev_stations"),
        jwt_secret=os.getenv("JWT_SECRET", "change-me-please"),
        jwt_alg=os.getenv("JWT_ALG", "HS256"),
        jwt_ttl=_get_env_int("JWT_TTL", 7 * 24 * 60 * 60),  # 7d
        app_env=os.getenv("APP_ENV", "development").strip().lower(),
        client_url=os.getenv("CLIENT_URL", "http://localhost:5173"),
        log_level=os.getenv("LOG_LEVEL", "WARNING").upper(),
        access_log_disabled=_get_env_bool("ACCESS_LOG_DISABLED", True),
        use_in_memory_db=_get_env_bool("USE_IN_MEMORY_DB", False),
        seed_owner_id=os.getenv("SEED_OWNER_ID", "6549a9282a301f2d1c1a7f01"),
    )
