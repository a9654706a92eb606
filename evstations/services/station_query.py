from __future__ import annotations

import asyncio
import logging
import math
from dataclasses import dataclass
from typing import Any, Mapping

from evstations.database.station_store import StationStore
from evstations.services.errors import classify_store_error
from evstations.services.station_filters import Predicate, parse_int

logger = logging.getLogger(__name__)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 20
MAX_LIMIT = 100


@dataclass(frozen=True)
class PageRequest:
    page: int
    limit: int

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


def resolve_page(params: Mapping[str, Any]) -> PageRequest:
    # 0 o inválido -> valor por defecto, como parseInt(x) || default
    page = parse_int(params.get("page")) or DEFAULT_PAGE
    limit = parse_int(params.get("limit")) or DEFAULT_LIMIT
    return PageRequest(page=max(1, page), limit=min(MAX_LIMIT, max(1, limit)))


def build_pagination(page: int, limit: int, total_count: int) -> dict:
    total_pages = math.ceil(total_count / limit)
    return {
        "currentPage": page,
        "totalPages": total_pages,
        "totalCount": total_count,
        "limit": limit,
        "hasNextPage": page < total_pages,
        "hasPrevPage": page > 1,
    }


def shape_station(doc: Mapping[str, Any]) -> dict:
    """Registro público de una estación; latitud y longitud se completan por separado."""
    coords = doc.get("coordinates")
    if not isinstance(coords, Mapping):
        coords = {}
    created_by = doc.get("createdBy")
    return {
        "id": str(doc.get("_id")),
        "name": doc.get("name"),
        "coordinates": {
            "latitude": coords.get("latitude"),
            "longitude": coords.get("longitude"),
        },
        "status": doc.get("status"),
        "powerOutput": doc.get("powerOutput"),
        "connectorType": doc.get("connectorType"),
        "createdBy": str(created_by) if created_by is not None else None,
        "createdAt": doc.get("createdAt"),
        "updatedAt": doc.get("updatedAt"),
    }


async def list_stations(store: StationStore, predicates: list[Predicate], page_request: PageRequest) -> dict:
    """Conteo y página en paralelo; si uno falla, la petición falla con ese error."""
    try:
        docs, total_count = await asyncio.gather(
            asyncio.to_thread(store.find_page, predicates, page_request.skip, page_request.limit),
            asyncio.to_thread(store.count, predicates),
        )
    except Exception as e:
        logger.error(f"Error in list charging stations: {e!r}")
        raise classify_store_error(e) from e

    stations = [shape_station(d) for d in docs]
    return {
        "chargingStations": stations,
        "pagination": build_pagination(page_request.page, page_request.limit, total_count),
    }
