import logging
from functools import lru_cache

import certifi
from pymongo import ASCENDING, MongoClient
from pymongo.database import Database

from evstations.config import get_settings

logger = logging.getLogger(__name__)

USERS = "users"
CHARGING_STATIONS = "chargingstations"


@lru_cache
def get_client() -> MongoClient:
    """Crea el cliente de MongoDB una sola vez por proceso."""
    settings = get_settings()
    if not settings.mongo_uri:
        raise RuntimeError(
            "MONGO_URI no está configurada y faltan MONGO_USER/MONGO_PASSWORD/MONGO_HOST en .env"
        )
    kwargs = {"serverSelectionTimeoutMS": 5000, "tz_aware": True}
    if settings.mongo_uri.startswith("mongodb+srv://"):
        # asegura cadena de certificados válida para Atlas
        kwargs["tlsCAFile"] = certifi.where()
    client = MongoClient(settings.mongo_uri, **kwargs)
    logger.info("Cliente MongoDB creado para la base %s", settings.db_name)
    return client


def get_db() -> Database:
    return get_client()[get_settings().db_name]


def get_collection(name: str):
    """Devuelve una colección de MongoDB por nombre"""
    return get_db()[name]


def ensure_indexes() -> None:
    db = get_db()
    db[USERS].create_index([("email", ASCENDING)], unique=True)
    db[CHARGING_STATIONS].create_index([("createdBy", ASCENDING)])
    db[CHARGING_STATIONS].create_index(
        [("coordinates.latitude", ASCENDING), ("coordinates.longitude", ASCENDING)]
    )
