"""
Wiring de dependencias para la app FastAPI.
"""
from __future__ import annotations

import logging

from evstations.config import get_settings
from evstations.database.station_store import InMemoryStationStore, MongoStationStore, StationStore
from evstations.database.user_store import InMemoryUserStore, MongoUserStore, UserStore

logger = logging.getLogger(__name__)

_station_store: StationStore | None = None
_user_store: UserStore | None = None


def _use_in_memory() -> bool:
    return get_settings().use_in_memory_db


def get_station_store() -> StationStore:
    """Singleton del almacén de estaciones (MongoDB o en memoria)."""
    global _station_store
    if _station_store is not None:
        return _station_store

    if _use_in_memory():
        logger.warning("Usando almacén de estaciones en memoria")
        _station_store = InMemoryStationStore()
    else:
        from evstations.database.database import CHARGING_STATIONS, get_collection

        _station_store = MongoStationStore(get_collection(CHARGING_STATIONS))
    return _station_store


def get_user_store() -> UserStore:
    global _user_store
    if _user_store is not None:
        return _user_store

    if _use_in_memory():
        logger.warning("Usando almacén de usuarios en memoria")
        _user_store = InMemoryUserStore()
    else:
        from evstations.database.database import USERS, get_collection

        _user_store = MongoUserStore(get_collection(USERS))
    return _user_store
