"""
Acceso a la colección de estaciones de carga: implementación MongoDB y una
implementación en memoria para desarrollo y tests.
"""
from __future__ import annotations

import copy
import threading
from datetime import datetime, timezone
from typing import Any, Optional, Protocol

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ReturnDocument
from pymongo.collection import Collection

from evstations.services.station_filters import Predicate, matches_all, to_mongo_query

# Campos declarados de una estación; nunca se devuelven campos internos
STATION_PROJECTION = {
    "_id": 1,
    "name": 1,
    "coordinates": 1,
    "status": 1,
    "powerOutput": 1,
    "connectorType": 1,
    "createdBy": 1,
    "createdAt": 1,
    "updatedAt": 1,
}


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _object_id(value: str) -> Optional[ObjectId]:
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


class StationStore(Protocol):
    """Interfaz del almacén de estaciones."""

    def count(self, predicates: list[Predicate]) -> int:
        ...

    def find_page(self, predicates: list[Predicate], skip: int, limit: int) -> list[dict]:
        ...

    def insert(self, doc: dict) -> dict:
        ...

    def insert_many(self, docs: list[dict]) -> int:
        ...

    def get(self, station_id: str) -> Optional[dict]:
        ...

    def update(self, station_id: str, fields: dict) -> Optional[dict]:
        ...

    def delete(self, station_id: str) -> bool:
        ...


def _prepare(doc: dict) -> dict:
    now = _now()
    out = dict(doc)
    if not isinstance(out.get("createdBy"), ObjectId):
        out["createdBy"] = ObjectId(str(out["createdBy"]))
    out.setdefault("createdAt", now)
    out["updatedAt"] = now
    return out


class MongoStationStore:
    def __init__(self, collection: Collection):
        self.collection = collection

    def count(self, predicates: list[Predicate]) -> int:
        return self.collection.count_documents(to_mongo_query(predicates))

    def find_page(self, predicates: list[Predicate], skip: int, limit: int) -> list[dict]:
        pipeline = [
            {"$match": to_mongo_query(predicates)},
            {"$sort": {"_id": 1}},
            {"$skip": skip},
            {"$limit": limit},
            {"$project": STATION_PROJECTION},
        ]
        return list(self.collection.aggregate(pipeline))

    def insert(self, doc: dict) -> dict:
        prepared = _prepare(doc)
        result = self.collection.insert_one(prepared)
        prepared["_id"] = result.inserted_id
        return prepared

    def insert_many(self, docs: list[dict]) -> int:
        result = self.collection.insert_many([_prepare(d) for d in docs])
        return len(result.inserted_ids)

    def get(self, station_id: str) -> Optional[dict]:
        oid = _object_id(station_id)
        if oid is None:
            return None
        return self.collection.find_one({"_id": oid}, STATION_PROJECTION)

    def update(self, station_id: str, fields: dict) -> Optional[dict]:
        oid = _object_id(station_id)
        if oid is None:
            return None
        changes = {k: v for k, v in fields.items() if k not in ("_id", "createdBy", "createdAt")}
        changes["updatedAt"] = _now()
        return self.collection.find_one_and_update(
            {"_id": oid},
            {"$set": changes},
            projection=STATION_PROJECTION,
            return_document=ReturnDocument.AFTER,
        )

    def delete(self, station_id: str) -> bool:
        oid = _object_id(station_id)
        if oid is None:
            return False
        return self.collection.delete_one({"_id": oid}).deleted_count > 0


class InMemoryStationStore:
    """Almacén en memoria con la misma semántica de filtros que MongoDB."""

    def __init__(self):
        self._lock = threading.Lock()
        self.stations: dict[ObjectId, dict] = {}

    def reset(self) -> None:
        with self._lock:
            self.stations.clear()

    def _matching(self, predicates: list[Predicate]) -> list[dict]:
        # Fuerza la conversión de los operandos como lo haría MongoDB
        to_mongo_query(predicates)
        with self._lock:
            docs = list(self.stations.values())
        return [d for d in docs if matches_all(predicates, d)]

    def count(self, predicates: list[Predicate]) -> int:
        return len(self._matching(predicates))

    def find_page(self, predicates: list[Predicate], skip: int, limit: int) -> list[dict]:
        page = self._matching(predicates)[skip : skip + limit]
        return [{k: copy.deepcopy(v) for k, v in d.items() if k in STATION_PROJECTION} for d in page]

    def insert(self, doc: dict) -> dict:
        prepared = _prepare(doc)
        prepared["_id"] = ObjectId()
        with self._lock:
            self.stations[prepared["_id"]] = prepared
        return copy.deepcopy(prepared)

    def insert_many(self, docs: list[dict]) -> int:
        for d in docs:
            self.insert(d)
        return len(docs)

    def get(self, station_id: str) -> Optional[dict]:
        oid = _object_id(station_id)
        with self._lock:
            doc = self.stations.get(oid) if oid else None
            return copy.deepcopy(doc) if doc else None

    def update(self, station_id: str, fields: dict) -> Optional[dict]:
        oid = _object_id(station_id)
        with self._lock:
            doc = self.stations.get(oid) if oid else None
            if doc is None:
                return None
            for key, value in fields.items():
                if key not in ("_id", "createdBy", "createdAt"):
                    doc[key] = copy.deepcopy(value)
            doc["updatedAt"] = _now()
            return copy.deepcopy(doc)

    def delete(self, station_id: str) -> bool:
        oid = _object_id(station_id)
        with self._lock:
            return self.stations.pop(oid, None) is not None if oid else False


def station_fields(values: dict[str, Any]) -> dict:
    """Campos editables de una estación a partir del cuerpo validado."""
    return {
        "name": values["name"],
        "coordinates": {"latitude": values["latitude"], "longitude": values["longitude"]},
        "status": values["status"],
        "powerOutput": values["powerOutput"],
        "connectorType": values["connectorType"],
    }
