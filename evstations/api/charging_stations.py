import logging

from fastapi import APIRouter, Depends, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError

from evstations.auth.session import current_user
from evstations.config import get_settings
from evstations.database.station_store import StationStore, station_fields
from evstations.dependencies import get_station_store
from evstations.models.models import StationBody
from evstations.services.errors import StationServiceError, error_payload
from evstations.services.sample_data import seed_sample_data
from evstations.services.station_filters import compose_filters
from evstations.services.station_query import list_stations, resolve_page, shape_station

logger = logging.getLogger(__name__)

router = APIRouter()


def _json(status_code: int, content: dict) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=jsonable_encoder(content))


def _server_error() -> JSONResponse:
    return _json(500, {"success": False, "message": "Server error"})


def _not_found() -> JSONResponse:
    return _json(404, {"success": False, "message": "Charging station not found"})


@router.get("/charging-stations", tags=["charging-stations"])  # /api/charging-stations
async def get_all(request: Request, store: StationStore = Depends(get_station_store)):
    """
    Listado paginado de estaciones.
    - search, status, powerOutput, connectorType, latitude+longitude: filtros (AND)
    - getByUserId=true: solo las estaciones del usuario autenticado
    - page, limit: paginación (limit entre 1 y 100)
    """
    user = current_user(request)
    params = request.query_params
    predicates = compose_filters(params, user_id=str(user["_id"]))
    page_request = resolve_page(params)
    try:
        data = await list_stations(store, predicates, page_request)
    except StationServiceError as err:
        return _json(err.status_code, error_payload(err, get_settings().expose_error_details))
    return _json(
        200,
        {
            "success": True,
            "data": data,
            "message": f"Found {len(data['chargingStations'])} charging stations",
        },
    )


@router.post("/charging-stations/seed", tags=["charging-stations"])
def seed(store: StationStore = Depends(get_station_store)):
    try:
        count = seed_sample_data(store, get_settings().seed_owner_id)
    except PyMongoError:
        logger.exception("Error seeding data")
        return _json(500, {"success": False, "message": "Failed to seed sample data"})
    return _json(
        201,
        {"success": True, "message": "Sample data created successfully", "data": {"count": count}},
    )


@router.post("/charging-stations", tags=["charging-stations"])
def create(body: StationBody, request: Request, store: StationStore = Depends(get_station_store)):
    user = current_user(request)
    doc = station_fields(body.model_dump())
    doc["createdBy"] = user["_id"]
    try:
        created = store.insert(doc)
    except PyMongoError:
        logger.exception("Error in create charging station")
        return _server_error()
    return _json(201, {"success": True, "data": shape_station(created)})


@router.get("/charging-stations/{station_id}", tags=["charging-stations"])
def get_by_id(station_id: str, request: Request, store: StationStore = Depends(get_station_store)):
    current_user(request)
    try:
        station = store.get(station_id)
    except PyMongoError:
        logger.exception("Error in get charging station")
        return _server_error()
    if not station:
        return _not_found()
    return _json(200, {"success": True, "data": shape_station(station)})


def _owned_station(store: StationStore, station_id: str, user: dict, action: str):
    """Devuelve (estación, None) o (None, respuesta de error)."""
    station = store.get(station_id)
    if not station:
        return None, _not_found()
    if str(station.get("createdBy")) != str(user["_id"]):
        return None, _json(
            403,
            {"success": False, "message": f"You are not authorized to {action} this charging station"},
        )
    return station, None


@router.put("/charging-stations/{station_id}", tags=["charging-stations"])
def update(station_id: str, body: StationBody, request: Request, store: StationStore = Depends(get_station_store)):
    user = current_user(request)
    try:
        _, denied = _owned_station(store, station_id, user, "update")
        if denied:
            return denied
        updated = store.update(station_id, station_fields(body.model_dump()))
    except PyMongoError:
        logger.exception("Error in update charging station")
        return _server_error()
    if not updated:
        return _not_found()
    return _json(200, {"success": True, "data": shape_station(updated)})


@router.delete("/charging-stations/{station_id}", tags=["charging-stations"])
def remove(station_id: str, request: Request, store: StationStore = Depends(get_station_store)):
    user = current_user(request)
    try:
        _, denied = _owned_station(store, station_id, user, "delete")
        if denied:
            return denied
        store.delete(station_id)
    except PyMongoError:
        logger.exception("Error in delete charging station")
        return _server_error()
    return _json(200, {"success": True, "message": "Charging station deleted successfully"})
