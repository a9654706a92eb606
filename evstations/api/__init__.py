from fastapi import APIRouter

from .auth_api import router as auth_router
from .charging_stations import router as charging_stations_router

router = APIRouter()
router.include_router(auth_router)
router.include_router(charging_stations_router)
