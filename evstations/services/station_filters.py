"""
Composición de filtros para el listado de estaciones de carga.

Cada parámetro de consulta presente se traduce en un predicado tipado; el
conjunto de predicados se combina con AND tanto en MongoDB (``to_mongo``) como
en el almacén en memoria (``matches``).
"""
from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

# Aproximación de un radio de ~5 km
LOCATION_DELTA = 0.05

_FLOAT_PREFIX = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_INT_PREFIX = re.compile(r"^\s*[+-]?\d+")


def parse_float(value: Any) -> Optional[float]:
    """Parseo tolerante de un prefijo numérico ("12kw" -> 12.0). None si no es finito."""
    if value is None:
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        m = _FLOAT_PREFIX.match(str(value))
        if not m:
            return None
        number = float(m.group(0))
    return number if math.isfinite(number) else None


def parse_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    m = _INT_PREFIX.match(str(value))
    return int(m.group(0)) if m else None


def _clean(value: Any) -> str:
    return str(value).strip() if value is not None else ""


def _nested(doc: Mapping[str, Any], path: str) -> Any:
    cur: Any = doc
    for part in path.split("."):
        if not isinstance(cur, Mapping):
            return None
        cur = cur.get(part)
    return cur


@dataclass(frozen=True)
class NameContains:
    text: str

    def to_mongo(self) -> dict:
        return {"name": {"$regex": re.escape(self.text), "$options": "i"}}

    def matches(self, doc: Mapping[str, Any]) -> bool:
        return self.text.lower() in str(doc.get("name") or "").lower()


@dataclass(frozen=True)
class StatusEquals:
    value: str

    def to_mongo(self) -> dict:
        return {"status": self.value}

    def matches(self, doc: Mapping[str, Any]) -> bool:
        return doc.get("status") == self.value


@dataclass(frozen=True)
class PowerEquals:
    value: float

    def to_mongo(self) -> dict:
        return {"powerOutput": self.value}

    def matches(self, doc: Mapping[str, Any]) -> bool:
        power = doc.get("powerOutput")
        return isinstance(power, (int, float)) and float(power) == self.value


@dataclass(frozen=True)
class ConnectorEquals:
    value: str

    def to_mongo(self) -> dict:
        return {"connectorType": self.value}

    def matches(self, doc: Mapping[str, Any]) -> bool:
        return doc.get("connectorType") == self.value


@dataclass(frozen=True)
class BoundingBox:
    min_lat: float
    max_lat: float
    min_lng: float
    max_lng: float

    @classmethod
    def around(cls, latitude: float, longitude: float, delta: float = LOCATION_DELTA) -> "BoundingBox":
        return cls(latitude - delta, latitude + delta, longitude - delta, longitude + delta)

    def to_mongo(self) -> dict:
        return {
            "coordinates.latitude": {"$gte": self.min_lat, "$lte": self.max_lat},
            "coordinates.longitude": {"$gte": self.min_lng, "$lte": self.max_lng},
        }

    def matches(self, doc: Mapping[str, Any]) -> bool:
        lat = _nested(doc, "coordinates.latitude")
        lng = _nested(doc, "coordinates.longitude")
        if not isinstance(lat, (int, float)) or not isinstance(lng, (int, float)):
            return False
        return self.min_lat <= lat <= self.max_lat and self.min_lng <= lng <= self.max_lng


@dataclass(frozen=True)
class OwnerEquals:
    user_id: str

    def to_mongo(self) -> dict:
        from bson import ObjectId

        # Un id malformado lanza InvalidId (error de parámetros)
        return {"createdBy": ObjectId(self.user_id)}

    def matches(self, doc: Mapping[str, Any]) -> bool:
        return str(doc.get("createdBy")) == self.user_id


Predicate = Union[NameContains, StatusEquals, PowerEquals, ConnectorEquals, BoundingBox, OwnerEquals]


def compose_filters(params: Mapping[str, Any], user_id: Optional[str] = None) -> list[Predicate]:
    """Traduce los parámetros de consulta en una lista ordenada de predicados."""
    predicates: list[Predicate] = []

    search = _clean(params.get("search"))
    if search:
        predicates.append(NameContains(search))

    status = _clean(params.get("status"))
    if status:
        predicates.append(StatusEquals(status))

    # 0 es un valor válido; no usar comprobaciones de "truthiness"
    power = parse_float(params.get("powerOutput"))
    if power is not None:
        predicates.append(PowerEquals(power))

    connector = _clean(params.get("connectorType"))
    if connector:
        predicates.append(ConnectorEquals(connector))

    latitude = parse_float(params.get("latitude"))
    longitude = parse_float(params.get("longitude"))
    if latitude is not None and longitude is not None:
        predicates.append(BoundingBox.around(latitude, longitude))

    if params.get("getByUserId") == "true" and user_id:
        predicates.append(OwnerEquals(str(user_id)))

    return predicates


def to_mongo_query(predicates: list[Predicate]) -> dict:
    if not predicates:
        return {}
    return {"$and": [p.to_mongo() for p in predicates]}


def matches_all(predicates: list[Predicate], doc: Mapping[str, Any]) -> bool:
    return all(p.matches(doc) for p in predicates)
